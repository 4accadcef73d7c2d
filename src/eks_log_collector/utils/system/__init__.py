# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
System information utilities package.

Provides detection of the host facts (init system, package manager,
instance id) that probes consume.
"""

from .detector import (
    INIT_SYSTEM_PROBES,
    PACKAGE_MANAGER_PROBES,
    EnvironmentDetector,
    is_process_running,
)

__all__ = [
    "EnvironmentDetector",
    "INIT_SYSTEM_PROBES",
    "PACKAGE_MANAGER_PROBES",
    "is_process_running",
]
