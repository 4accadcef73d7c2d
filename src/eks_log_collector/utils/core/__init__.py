# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Core utilities package.

This package contains core functionality for the collector including:
- Run context and environment kinds
- Probe results and the run report
- Bounded process execution
- Fatal precondition checks and error types
"""

from .context import CollectionMode, InitKind, PackageManagerKind, RunContext
from .errors import (
    ArchiveError,
    CollectorError,
    ConfirmationDeclinedError,
    FatalPreconditionError,
    InsufficientDiskSpaceError,
    MissingToolError,
    NotRootError,
    ProbeTimeoutError,
    VariantNotSupportedError,
)
from .process import (
    ProcessExecutor,
    ProcessResult,
    cleanup_processes,
    get_executor,
)
from .result import ProbeResult, ProbeStatus, RunReport

# Make sub-modules available
from . import context
from . import errors
from . import preconditions
from . import process
from . import result

__all__ = [
    # Run context
    "CollectionMode",
    "InitKind",
    "PackageManagerKind",
    "RunContext",
    # Results
    "ProbeResult",
    "ProbeStatus",
    "RunReport",
    # Errors
    "ArchiveError",
    "CollectorError",
    "ConfirmationDeclinedError",
    "FatalPreconditionError",
    "InsufficientDiskSpaceError",
    "MissingToolError",
    "NotRootError",
    "ProbeTimeoutError",
    "VariantNotSupportedError",
    # Process execution
    "ProcessExecutor",
    "ProcessResult",
    "cleanup_processes",
    "get_executor",
    # Sub-modules
    "context",
    "errors",
    "preconditions",
    "process",
    "result",
]
