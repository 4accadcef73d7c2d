# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("eks-log-collector")
except PackageNotFoundError:
    __version__ = "0.0.4"
