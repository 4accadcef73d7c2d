# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Utility modules for the collector.

Sub-packages:
- core: Run context, results, bounded process execution and fatal checks
- system: Host environment detection
- reporting: End-of-run summary table
- infrastructure: Local HTTP endpoints (instance metadata, L-IPAMD)
- config: Configuration management
- logging: Logging configuration and utilities
- cli: Argument parsing, interrupt handling and the mode commands
"""

from . import config, core, infrastructure, logging, reporting, system

__all__ = [
    "core",
    "system",
    "reporting",
    "infrastructure",
    "config",
    "logging",
]
