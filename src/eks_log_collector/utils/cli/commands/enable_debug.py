# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Enable debug command implementation.

Turns on debug mode for the Docker daemon after an explicit confirmation.
This is the only mode that changes the host; it never collects or archives
anything.
"""

import logging
import os
import shutil
import sys
from typing import Callable, Optional

from eks_log_collector.probes.docker import DebugToggleOutcome, enable_docker_debug
from eks_log_collector.utils.config import CollectorConfig, load_collector_config
from eks_log_collector.utils.core.errors import CollectorError, ConfirmationDeclinedError
from eks_log_collector.utils.core.preconditions import check_required_tools, check_root
from eks_log_collector.utils.core.process import ProcessExecutor, get_executor
from eks_log_collector.utils.logging import setup_command_logging
from eks_log_collector.utils.system import EnvironmentDetector

logger = logging.getLogger(__name__)

CONFIRMATION_PROMPT = (
    "Enabled Docker Debug will restart the Docker Daemon and restart all running container. Are you sure? [y/N] "
)

AFFIRMATIVE_ANSWERS = ("y", "yes")


def read_answer(input_func: Callable[[str], str] = input) -> str:
    """Read one answer from the operator; end of input counts as an empty answer."""
    if not sys.stdin.isatty():
        # Answer piped in, echo the question for the transcript
        print(CONFIRMATION_PROMPT, end="", flush=True)
        line = sys.stdin.readline()
        return line.strip()
    try:
        return input_func(CONFIRMATION_PROMPT).strip()
    except EOFError:
        return ""


def confirm(force: bool = False, answer_func: Callable[[], str] = read_answer) -> None:
    """
    Ask the operator to confirm the Docker daemon restart.

    Args:
        force: Skip the prompt and proceed
        answer_func: Returns the operator's answer

    Raises:
        ConfirmationDeclinedError: Unless the answer is yes
    """
    if force:
        logger.info("Confirmation skipped (--force)")
        return
    answer = answer_func()
    if answer.lower() not in AFFIRMATIVE_ANSWERS:
        raise ConfirmationDeclinedError('"No" was selected.')


def enable_debug(
    config: Optional[CollectorConfig] = None,
    force: bool = False,
    verbose: bool = False,
    debug: bool = False,
    detector: Optional[EnvironmentDetector] = None,
    executor: Optional[ProcessExecutor] = None,
    answer_func: Callable[[], str] = read_answer,
    which: Callable = shutil.which,
    geteuid: Callable[[], int] = os.geteuid,
) -> int:
    """
    Enable Docker daemon debug mode.

    Args:
        config: Collector configuration, loaded from the packaged defaults when None
        force: Skip the confirmation prompt
        verbose: Whether to show more detailed output
        debug: Whether to show debug level logs
        detector: Environment detector, built from the configuration when None
        executor: Executor restarting the daemon, the global executor when None
        answer_func: Returns the operator's answer to the confirmation prompt
        which: PATH lookup used for the required tools check
        geteuid: Effective user id lookup used for the root check

    Returns:
        int: Exit code (0 for success, non-zero for failure or a declined prompt)
    """
    try:
        config = config or load_collector_config()
        check_root(geteuid)

        log_file = setup_command_logging(
            "enable_debug", logs_dir=str(config.logs_dir), program_name=config.program_name, verbose=verbose, debug=debug
        )
        if log_file:
            logger.info(f"Logging to {log_file}")

        check_required_tools(config.required_utils, which)
        detector = detector or EnvironmentDetector.from_config(config, which=which)
        context = detector.detect()

        confirm(force, answer_func)

        outcome = enable_docker_debug(context, config, executor or get_executor(config.kill_grace))
        if outcome.debug_enabled:
            print("Debug mode is enabled for the Docker daemon.")
        else:
            print("Debug mode was not enabled.")
        return 1 if outcome == DebugToggleOutcome.RESTART_FAILED else 0

    except ConfirmationDeclinedError as e:
        logger.warning(str(e))
        return 1
    except CollectorError as e:
        logger.error(str(e))
        logger.debug("Enable debug aborted", exc_info=debug)
        return 1
    except Exception as e:
        logger.error(f"Enabling Docker debug mode failed: {e}")
        logger.debug("Unexpected error", exc_info=True)
        return 1
