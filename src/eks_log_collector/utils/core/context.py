# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Run context shared read-only by the orchestrator and every probe.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path


class InitKind(Enum):
    """Service manager family detected on the host."""

    SYSTEMD = "systemd"
    OTHER = "other"
    UNKNOWN = "unknown"


class PackageManagerKind(Enum):
    """Package manager family detected on the host."""

    RPM = "rpm"
    DEB = "deb"
    UNKNOWN = "unknown"


class CollectionMode(Enum):
    """Operating modes selectable from the command line."""

    COLLECT = "collect"
    ENABLE_DEBUG = "enable_debug"

    @classmethod
    def from_value(cls, value: str) -> "CollectionMode":
        """
        Look up a mode by its command line value.

        Raises:
            ValueError: If the value does not name a known mode
        """
        for mode in cls:
            if mode.value == value:
                return mode
        raise ValueError(f"Unknown mode: {value}")


@dataclass(frozen=True)
class RunContext:
    """
    Host facts gathered once at the start of a run.

    Attributes:
        init_kind: Detected service manager family
        package_manager_kind: Detected package manager family
        instance_id: EC2 instance identifier, empty when the metadata service was unreachable
        working_root: Directory the category tree is created under
        started_at: UTC timestamp taken when detection ran
    """

    init_kind: InitKind
    package_manager_kind: PackageManagerKind
    instance_id: str
    working_root: Path
    started_at: datetime

    def since(self, days: int) -> str:
        """Return a journal ``--since`` bound ``days`` before the run started, in local time."""
        return (self.started_at - timedelta(days=days)).astimezone().strftime("%Y-%m-%d %H:%M")
