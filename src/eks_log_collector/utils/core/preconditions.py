# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Fatal precondition checks.

These checks run before any probe executes and abort the whole run when
they fail: collection is meaningless without its tools, and a bundle
written to a nearly full disk is worse than none.
"""

import logging
import os
import shutil
from typing import Callable, Iterable, List, Optional

import psutil

from .errors import InsufficientDiskSpaceError, MissingToolError, NotRootError

logger = logging.getLogger(__name__)


def check_root(geteuid: Callable[[], int] = os.geteuid) -> None:
    """
    Ensure the process runs with root privileges.

    Raises:
        NotRootError: If the effective user is not root
    """
    if geteuid() != 0:
        raise NotRootError("This script must be run as root!")


def find_missing_tools(
    tools: Iterable[str], which: Callable[[str], Optional[str]] = shutil.which
) -> List[str]:
    """Return the tools from ``tools`` that are not on PATH, in the given order."""
    return [tool for tool in tools if which(tool) is None]


def check_required_tools(tools: Iterable[str], which: Callable[[str], Optional[str]] = shutil.which) -> None:
    """
    Ensure every required external utility is available.

    Raises:
        MissingToolError: For the first missing tool
    """
    missing = find_missing_tools(tools, which)
    if missing:
        logger.debug(f"Missing required tools: {missing}")
        raise MissingToolError(missing[0])


def get_free_space_kb(path: str, disk_usage: Callable = psutil.disk_usage) -> int:
    """Free space available to unprivileged users on the filesystem holding ``path``, in KiB."""
    return int(disk_usage(path).free // 1024)


def check_disk_space(path: str, threshold_kb: int, disk_usage: Callable = psutil.disk_usage) -> int:
    """
    Ensure the filesystem holding ``path`` has more than ``threshold_kb`` free.

    Returns:
        int: Free space in KiB

    Raises:
        InsufficientDiskSpaceError: If free space is less than or equal to the threshold
    """
    free_kb = get_free_space_kb(path, disk_usage)
    logger.debug(f"Free space on {path}: {free_kb} KiB (threshold {threshold_kb} KiB)")
    if free_kb <= threshold_kb:
        raise InsufficientDiskSpaceError(path, free_kb, threshold_kb)
    return free_kb
