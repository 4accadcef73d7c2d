# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Docker probes and the Docker daemon debug toggle.

The collection probes only run while the Docker daemon is up. The debug
toggle is not a probe: it is the single action of the enable_debug mode and
the only code path in the collector that modifies the host.
"""

import logging
import re
from enum import Enum
from typing import Callable

from ..utils.core.context import InitKind, PackageManagerKind, RunContext
from ..utils.core.process import ProcessExecutor
from ..utils.system.detector import is_process_running
from .base import ProbeSession

logger = logging.getLogger(__name__)

DOCKER_INFO_COMMANDS = (
    (["docker", "info"], "docker-info.txt"),
    (["docker", "ps", "--all", "--no-trunc"], "docker-ps.txt"),
    (["docker", "images"], "docker-images.txt"),
    (["docker", "version"], "docker-version.txt"),
)

# Directories under /var/log holding daemon logs on hosts without systemd
LEGACY_LOG_ENTRIES = (
    ("docker", "docker"),
    ("upstart/docker", "upstart_docker"),
)

DEBUG_OPTIONS_PATTERN = re.compile(r'^\s*OPTIONS="-D', re.MULTILINE)
DEBUG_OPTIONS_LINE = 'OPTIONS="-D $OPTIONS"\n'


def docker_running(process_name: str = "dockerd") -> Callable[[RunContext], bool]:
    """Capability predicate that holds while the Docker daemon process is running."""

    def _check(context: RunContext) -> bool:
        return is_process_running(process_name)

    return _check


def collect_docker_info(session: ProbeSession) -> None:
    for command, output in DOCKER_INFO_COMMANDS:
        session.run(command, output=output, merge_stderr=True)


def collect_containers(session: ProbeSession) -> None:
    """Save ``docker inspect`` output for every running container."""
    listing = session.run(["docker", "ps", "-q"])
    if listing.failed:
        return
    container_ids = listing.stdout.split()
    logger.debug(f"Inspecting {len(container_ids)} containers")
    for container_id in container_ids:
        session.run(["docker", "inspect", container_id], output=f"container-{container_id}.txt", merge_stderr=True)


def collect_docker_journal(session: ProbeSession) -> None:
    since = session.context.since(session.config.journal_since_days)
    session.run(["journalctl", "--unit=docker", "--since", since], output="docker.log")


def collect_docker_log_files(session: ProbeSession) -> None:
    for entry, name in LEGACY_LOG_ENTRIES:
        session.copy(session.config.var_log_dir / entry, name)


DOCKER_LOG_VARIANTS = {
    InitKind.SYSTEMD: collect_docker_journal,
    InitKind.OTHER: collect_docker_log_files,
}


class DebugToggleOutcome(Enum):
    """What enable_docker_debug did."""

    ENABLED = "enabled"
    ALREADY_ENABLED = "already_enabled"
    RESTART_FAILED = "restart_failed"
    NOT_CONFIGURED = "not_configured"
    UNSUPPORTED = "unsupported"

    @property
    def debug_enabled(self) -> bool:
        return self in (DebugToggleOutcome.ENABLED, DebugToggleOutcome.ALREADY_ENABLED)


def enable_docker_debug(context: RunContext, config, executor: ProcessExecutor) -> DebugToggleOutcome:
    """
    Turn on debug mode for the Docker daemon and restart it.

    Only RPM based hosts are supported: the daemon options live in
    /etc/sysconfig/docker there. Other hosts and hosts without that file
    are left untouched.

    Args:
        context: Detected run context
        config: Collector configuration
        executor: Executor used to restart the daemon

    Returns:
        DebugToggleOutcome: What was done
    """
    if context.package_manager_kind != PackageManagerKind.RPM:
        logger.warning("The current operating system is not supported.")
        return DebugToggleOutcome.UNSUPPORTED

    sysconfig = config.docker_sysconfig
    if not sysconfig.exists():
        logger.warning(f"{sysconfig} not found, Docker daemon options cannot be changed.")
        return DebugToggleOutcome.NOT_CONFIGURED

    content = sysconfig.read_text(encoding="utf-8")
    if DEBUG_OPTIONS_PATTERN.search(content):
        logger.info("Debug mode is already enabled.")
        return DebugToggleOutcome.ALREADY_ENABLED

    with open(sysconfig, "a", encoding="utf-8") as handle:
        if content and not content.endswith("\n"):
            handle.write("\n")
        handle.write(DEBUG_OPTIONS_LINE)
    logger.info(f"Added debug flag to {sysconfig}")

    result = executor.run(["service", "docker", "restart"], timeout=config.command_timeout, merge_stderr=True)
    if result.failed:
        logger.warning(f"Unable to restart the Docker daemon: {result.describe_failure()}")
        return DebugToggleOutcome.RESTART_FAILED
    return DebugToggleOutcome.ENABLED
