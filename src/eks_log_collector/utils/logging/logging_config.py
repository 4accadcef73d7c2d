# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Logging configuration utilities for the collector.

This module provides centralized logging configuration and utilities,
including console and file handler management, log level configuration,
and mode-specific logging setup.
"""

import logging
import os
import sys
from typing import Optional

# Default logging format
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
# Simple message-only format for regular console output
MESSAGE_ONLY_FORMAT = "%(message)s"
DEBUG_MESSAGE_ONLY_FORMAT = "%(levelname)s - %(message)s"

THIRD_PARTY_LOGGERS = ["urllib3", "requests", "psutil"]


def init_core_logging(debug: bool = False) -> logging.Logger:
    """
    Initialize core logging with basic configuration.

    Returns:
        logging.Logger: Configured core logger instance
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=MESSAGE_ONLY_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    logger = logging.getLogger(__name__)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = True

    suppress_third_party_loggers()

    return logger


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """
    Configure logging level based on verbose and debug flags.

    Args:
        verbose: Whether to display more detailed messages
        debug: Whether to display DEBUG level logs

    Note:
        By default only warnings and errors are logged on the console; progress
        lines are printed separately. Verbose mode adds INFO records while debug
        mode shows everything including DEBUG records.
    """
    remove_log_handlers()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_handler = None
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler) and getattr(handler, "stream", None) in (sys.stdout, sys.stderr):
            console_handler = handler
            break

    if console_handler is None:
        console_handler = logging.StreamHandler(sys.stdout)
        root_logger.addHandler(console_handler)

    if debug:
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(DEBUG_MESSAGE_ONLY_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(MESSAGE_ONLY_FORMAT))
        if verbose:
            console_handler.setLevel(logging.INFO)
        else:
            console_handler.setLevel(logging.WARNING)


def remove_log_handlers() -> None:
    """
    Remove all file handlers from the root logger to avoid duplicates when reconfiguring.
    """
    root_logger = logging.getLogger()
    handlers_to_remove = [handler for handler in root_logger.handlers if isinstance(handler, logging.FileHandler)]

    for handler in handlers_to_remove:
        root_logger.removeHandler(handler)
        handler.close()


def get_log_file_path(command: str, logs_dir: str, program_name: str) -> str:
    """
    Get the path to a command's log file.

    Args:
        command: Command (mode) name
        logs_dir: Directory holding the log files
        program_name: Program name used as the file prefix

    Returns:
        Path to the log file
    """
    return os.path.join(logs_dir, f"{program_name}_{command}.log")


def add_file_log_handler(command: str, logs_dir: str, program_name: str) -> Optional[str]:
    """
    Add a file handler for logging to a command-specific log file.

    Args:
        command: The command name for the log file
        logs_dir: Directory for the log file, created when missing
        program_name: Program name used as the file prefix

    Returns:
        The log file path, or None when the directory is not writable
    """
    log_file = get_log_file_path(command, logs_dir, program_name)
    try:
        os.makedirs(logs_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w")  # Overwrite on each run
    except OSError as e:
        logging.getLogger(__name__).warning(f"Unable to write log file {log_file}: {e}")
        return None

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(file_handler)
    return log_file


def suppress_third_party_loggers() -> None:
    """
    Suppress noisy third-party library loggers.
    """
    for logger_name in THIRD_PARTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def setup_command_logging(
    command: str,
    logs_dir: Optional[str] = None,
    program_name: str = "eks-log-collector",
    verbose: bool = False,
    debug: bool = False,
) -> Optional[str]:
    """
    Set up logging for a specific mode with both console and file output.

    Args:
        command: Command (mode) name
        logs_dir: Directory for the file log; no file log when None
        program_name: Program name used as the log file prefix
        verbose: Whether to enable verbose console output
        debug: Whether to enable debug console output

    Returns:
        The log file path when a file handler was added
    """
    init_core_logging(debug=debug)
    configure_logging(verbose=verbose, debug=debug)

    log_file = None
    if logs_dir:
        log_file = add_file_log_handler(command, logs_dir, program_name)

    suppress_third_party_loggers()
    return log_file


def cleanup_logging() -> None:
    """
    Clean up logging handlers on application exit.
    """
    remove_log_handlers()
