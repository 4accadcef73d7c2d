# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Exception types shared by the collection pipeline.

Fatal errors derive from CollectorError and propagate to the command
functions, which turn them into a non-zero exit code. Probe-level errors
(ProbeTimeoutError, VariantNotSupportedError) are raised inside probe
sessions and are always converted into RunReport entries by the orchestrator.
"""


class CollectorError(Exception):
    """Base class for errors that abort a collector run."""

    pass


class FatalPreconditionError(CollectorError):
    """A precondition that must hold before any probe executes is not met."""

    pass


class NotRootError(FatalPreconditionError):
    """The collector was started without root privileges."""

    pass


class MissingToolError(FatalPreconditionError):
    """A required external utility is not available on PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(
            f'Application "{tool}" is missing, please install "{tool}" as this script requires it, '
            "and will not function without it."
        )


class InsufficientDiskSpaceError(FatalPreconditionError):
    """Free space on the collection filesystem is at or below the threshold."""

    def __init__(self, path: str, free_kb: int, threshold_kb: int):
        self.path = path
        self.free_kb = free_kb
        self.threshold_kb = threshold_kb
        super().__init__(
            f"Free space on {path} is less than or equal to {threshold_kb >> 10}MB, "
            "please ensure adequate disk space to collect and store the log files."
        )


class ConfirmationDeclinedError(CollectorError):
    """The operator answered "no" to a confirmation prompt."""

    pass


class ArchiveError(CollectorError):
    """The collected tree could not be written into an archive."""

    pass


class ProbeTimeoutError(Exception):
    """A probe exceeded its wall-clock budget."""

    pass


class VariantNotSupportedError(Exception):
    """No probe variant matches the detected environment."""

    pass
