# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Result module for probe outcomes.

A ProbeResult records how one probe execution ended. The RunReport keeps
one result per executed probe, in registration order, and is only used for
display at the end of a run.
"""

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class ProbeStatus(Enum):
    """Final state of a probe execution."""

    SUCCESS = "success"
    PARTIAL = "partial"
    SKIPPED = "skipped"
    TIMED_OUT = "timed-out"
    FAILED = "failed"


@dataclass
class ProbeResult:
    """
    Outcome of a single probe execution.

    Attributes:
        name: Probe name
        status: Final probe status
        message: Human-readable detail, empty on plain success
        elapsed: Wall-clock seconds spent in the probe
    """

    name: str
    status: ProbeStatus
    message: str = ""
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        """True when the probe ran to completion without sub-step failures."""
        return self.status == ProbeStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass
class RunReport:
    """Ordered record of every probe outcome for one run."""

    results: List[ProbeResult] = field(default_factory=list)

    def add(self, result: ProbeResult) -> None:
        logger.debug(f"Recording {result.name}: {result.status.value} ({result.elapsed:.2f}s)")
        self.results.append(result)

    def get(self, name: str) -> Optional[ProbeResult]:
        for result in self.results:
            if result.name == name:
                return result
        return None

    def by_status(self, status: ProbeStatus) -> List[ProbeResult]:
        return [result for result in self.results if result.status == status]

    def counts(self) -> Dict[str, int]:
        """Number of results per status, every status present even when zero."""
        counts = {status.value: 0 for status in ProbeStatus}
        for result in self.results:
            counts[result.status.value] += 1
        return counts

    @property
    def total_elapsed(self) -> float:
        return sum(result.elapsed for result in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [result.to_dict() for result in self.results],
            "counts": self.counts(),
            "total_elapsed": round(self.total_elapsed, 2),
        }

    def __iter__(self) -> Iterator[ProbeResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)
