# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
CLI utilities package.

This package contains the mode implementations, the argument parser and
the interrupt handlers, keeping the main CLI file lightweight.
"""

from .handlers import handle_interrupt, install_signal_handlers, restore_signal_handlers
from .parsers import create_argument_parser

# Commands are imported dynamically as needed

__all__ = [
    "handle_interrupt",
    "install_signal_handlers",
    "restore_signal_handlers",
    "create_argument_parser",
]
