# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Argument parser setup for the collector CLI.

Keeps the option definitions in one place. Usage errors (unknown options,
unknown modes) print the usage text and exit with status 1.
"""

import argparse
import sys

from eks_log_collector.utils.config import get_dist_version
from eks_log_collector.utils.core.context import CollectionMode

CLI_NAME = "eks-log-collector"

MODE_HELP = f"""
MODES:
  {CollectionMode.COLLECT.value:<14} Gather operating system, Docker and Kubernetes node logs into
                 a compressed bundle (default)
  {CollectionMode.ENABLE_DEBUG.value:<14} Enable debug mode for the Docker daemon (Amazon Linux only).
                 Restarts the Docker daemon and all running containers.

EXAMPLES:
  sudo {CLI_NAME}                          # Collect logs
  sudo {CLI_NAME} --mode=enable_debug      # Enable Docker daemon debug mode
  sudo {CLI_NAME} --mode=enable_debug -f   # Same, without the confirmation prompt
"""


class CollectorArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser ready for argument parsing
    """
    parser = CollectorArgumentParser(
        prog=CLI_NAME,
        description="Collect operating system, Docker and Kubernetes logs from an EKS worker node.",
        epilog=MODE_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )

    parser.add_argument("--version", action="version", version=f"{get_dist_version()}")

    parser.add_argument(
        "--mode",
        "-m",
        choices=[mode.value for mode in CollectionMode],
        default=CollectionMode.COLLECT.value,
        help="Operation mode (default: %(default)s)",
    )

    parser.add_argument(
        "--force", "-f", action="store_true", help="Skip the confirmation prompt of the enable_debug mode"
    )

    parser.add_argument("--verbose", "-v", action="store_true", help="Display more detailed output")

    parser.add_argument("--debug", "-d", action="store_true", help="Display debug output with full traceback")

    return parser
