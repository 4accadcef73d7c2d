# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Signal handlers and interrupt management for CLI operations.

An operator interrupt stops the external command that is currently running
and ends the process with the conventional 128 + signal number status. The
working tree is left in place so partial output can be inspected.
"""

import logging
import signal
from typing import Dict

from eks_log_collector.utils.core.process import cleanup_processes

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)

SIGNAL_NAMES = {
    signal.SIGINT: "SIGINT (Keyboard Interrupt)",
    signal.SIGTERM: "SIGTERM (Termination)",
}


def handle_interrupt(sig, frame):
    """
    Global signal handler for operator interrupts.
    Terminates running commands and exits with 128 + signal number.
    """
    logger.debug(f"handle_interrupt called with signal: {sig}, frame: {frame}")
    signal_name = SIGNAL_NAMES.get(sig, f"Signal {sig}")
    logger.warning(f"Interrupt detected: {signal_name}. Stopping running commands.")

    cleanup_processes()
    raise SystemExit(128 + int(sig))


def install_signal_handlers() -> Dict[int, object]:
    """
    Register handle_interrupt for SIGINT and SIGTERM.

    Returns:
        Dict[int, object]: The previous handlers, for restore_signal_handlers
    """
    return {sig: signal.signal(sig, handle_interrupt) for sig in HANDLED_SIGNALS}


def restore_signal_handlers(original_handlers: Dict[int, object]) -> None:
    for sig, handler in original_handlers.items():
        signal.signal(sig, handler)
