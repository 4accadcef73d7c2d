# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Command Line Interface for the EKS log collector.

Parses the options, configures logging and dispatches to the command
function of the selected mode. The mode implementations live in
utils.cli.commands.
"""

import atexit
import logging
import sys
from typing import List, Optional

import yaml

from eks_log_collector.utils.cli.commands import get_command_function
from eks_log_collector.utils.cli.handlers import install_signal_handlers, restore_signal_handlers
from eks_log_collector.utils.cli.parsers import create_argument_parser
from eks_log_collector.utils.config import load_collector_config
from eks_log_collector.utils.core.context import CollectionMode
from eks_log_collector.utils.logging import cleanup_logging, configure_logging

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments, defaults to sys.argv[1:]

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, debug=args.debug)
    atexit.register(cleanup_logging)

    try:
        config = load_collector_config()
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Unable to load configuration: {e}")
        return 1

    mode = CollectionMode.from_value(args.mode)
    original_handlers = install_signal_handlers()
    try:
        if mode == CollectionMode.ENABLE_DEBUG:
            enable_debug = get_command_function("enable_debug")
            return enable_debug(config=config, force=args.force, verbose=args.verbose, debug=args.debug)
        else:
            collect_logs = get_command_function("collect_logs")
            return collect_logs(config=config, verbose=args.verbose, debug=args.debug)
    finally:
        restore_signal_handlers(original_handlers)


if __name__ == "__main__":
    sys.exit(main())
