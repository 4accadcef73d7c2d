# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Run summary table generator.

This module renders the RunReport of a collection run as a plain text
table printed at the end of the run.
"""

import logging
from typing import Optional

from ..core.result import ProbeStatus, RunReport

logger = logging.getLogger(__name__)

TABLE_WIDTH = 100


def format_duration(duration_seconds: float) -> str:
    """
    Format duration in a human-readable format.

    Args:
        duration_seconds: Duration in seconds

    Returns:
        Formatted duration string
    """
    if duration_seconds < 60:
        return f"{duration_seconds:.3f} seconds"
    elif duration_seconds < 3600:
        minutes = int(duration_seconds // 60)
        seconds = duration_seconds % 60
        return f"{minutes}m {seconds:.3f}s"
    else:
        hours = int(duration_seconds // 3600)
        remaining_seconds = duration_seconds % 3600
        minutes = int(remaining_seconds // 60)
        seconds = remaining_seconds % 60
        return f"{hours}h {minutes}m {seconds:.3f}s"


class RunSummaryTableGenerator:
    """Generator for the end-of-run probe table."""

    def __init__(self, report: RunReport, archive_path: Optional[str] = None):
        """
        Initialize table generator with a run report.

        Args:
            report: Probe results of the run
            archive_path: Location of the written bundle, if any
        """
        self.report = report
        self.archive_path = archive_path

    def generate_probe_table(self) -> str:
        """
        Generate one row per probe in execution order.

        Returns:
            Formatted table as string
        """
        if not len(self.report):
            return "No probe results available"

        table_lines = []
        table_lines.append("-" * TABLE_WIDTH)
        table_lines.append(f"{'Probe':<20} {'Status':<10} {'Time (s)':<10} {'Detail':<57}")
        table_lines.append("-" * TABLE_WIDTH)

        for result in self.report:
            detail = result.message.splitlines()[0] if result.message else ""
            if len(detail) > 57:
                detail = detail[:55] + ".."
            table_lines.append(f"{result.name:<20} {result.status.value:<10} {result.elapsed:<10.3f} {detail}")

        table_lines.append("-" * TABLE_WIDTH)
        return "\n".join(table_lines)

    def generate_statistics(self) -> str:
        table_lines = []
        table_lines.append("RUN STATISTICS")
        table_lines.append("-" * 40)
        table_lines.append(f"Total Probes: {len(self.report)}")
        table_lines.append(f"Total Duration: {format_duration(self.report.total_elapsed)}")

        # Only non-zero statuses, in enum order
        counts = self.report.counts()
        for status in ProbeStatus:
            if counts[status.value] > 0:
                table_lines.append(f"{status.value.title()}: {counts[status.value]}")
        return "\n".join(table_lines)

    def generate(self) -> str:
        sections = [self.generate_probe_table(), "", self.generate_statistics()]
        if self.archive_path:
            sections.extend(["", f"Archive: {self.archive_path}"])
        return "\n".join(sections)
