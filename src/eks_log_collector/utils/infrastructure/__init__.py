# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Infrastructure utilities package.

Provides HTTP access to the node-local metadata and introspection endpoints.
"""

from .network import fetch_text, get_instance_id, get_metadata_token

__all__ = [
    "fetch_text",
    "get_instance_id",
    "get_metadata_token",
]
