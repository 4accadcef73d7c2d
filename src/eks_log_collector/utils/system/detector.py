# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Host environment detection.

Determines the facts probes use to pick their behaviour: the service
manager family, the package manager family and the EC2 instance id. The
detector has no side effects and runs once per collector invocation.
"""

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

import psutil

from ..core.context import InitKind, PackageManagerKind, RunContext
from ..infrastructure.network import get_instance_id

logger = logging.getLogger(__name__)

# Probed in order, first match wins
INIT_SYSTEM_PROBES: Sequence[Tuple[str, InitKind]] = (
    ("systemctl", InitKind.SYSTEMD),
    ("initctl", InitKind.OTHER),
    ("service", InitKind.OTHER),
)

PACKAGE_MANAGER_PROBES: Sequence[Tuple[str, PackageManagerKind]] = (
    ("rpm", PackageManagerKind.RPM),
    ("dpkg", PackageManagerKind.DEB),
)


class EnvironmentDetector:
    """
    Detects host facts and builds the RunContext for a run.

    The lookup callables are injectable so the detector can be exercised
    against fake environments.
    """

    def __init__(
        self,
        working_root: Path,
        metadata_url: str,
        metadata_token_url: Optional[str] = None,
        metadata_timeout: float = 3.0,
        which: Callable[[str], Optional[str]] = shutil.which,
        instance_id_lookup: Optional[Callable[[], str]] = None,
        clock: Callable[[], datetime] = None,
    ):
        self.working_root = Path(working_root)
        self.metadata_url = metadata_url
        self.metadata_token_url = metadata_token_url
        self.metadata_timeout = metadata_timeout
        self.which = which
        self.instance_id_lookup = instance_id_lookup or self._query_instance_id
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_config(cls, config, **kwargs) -> "EnvironmentDetector":
        return cls(
            working_root=config.working_root,
            metadata_url=config.instance_metadata_url,
            metadata_token_url=config.metadata_token_url,
            metadata_timeout=config.metadata_timeout,
            **kwargs,
        )

    def detect(self) -> RunContext:
        """
        Gather host facts.

        Returns:
            RunContext: Immutable context shared by every probe of the run
        """
        init_kind = self.detect_init_kind()
        package_manager_kind = self.detect_package_manager_kind()
        instance_id = self.instance_id_lookup()

        logger.info(
            f"Detected init system: {init_kind.value}, package manager: {package_manager_kind.value}, "
            f"instance id: {instance_id or 'unknown'}"
        )

        return RunContext(
            init_kind=init_kind,
            package_manager_kind=package_manager_kind,
            instance_id=instance_id,
            working_root=self.working_root,
            started_at=self.clock(),
        )

    def detect_init_kind(self) -> InitKind:
        for tool, kind in INIT_SYSTEM_PROBES:
            if self.which(tool):
                return kind
        return InitKind.UNKNOWN

    def detect_package_manager_kind(self) -> PackageManagerKind:
        for tool, kind in PACKAGE_MANAGER_PROBES:
            if self.which(tool):
                return kind
        return PackageManagerKind.UNKNOWN

    def _query_instance_id(self) -> str:
        return get_instance_id(self.metadata_url, self.metadata_token_url, timeout=self.metadata_timeout)


def is_process_running(name: str) -> bool:
    """
    Check whether a process with the given executable name is running.

    Args:
        name: Process name as reported by the kernel (e.g., "dockerd")

    Returns:
        bool: True if at least one matching process exists
    """
    for process in psutil.process_iter(["name"]):
        try:
            if process.info.get("name") == name:
                return True
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
    return False
