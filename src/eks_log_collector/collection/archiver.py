# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Bundle the collected tree into a gzip compressed tarball.
"""

import logging
import os
import shutil
import tarfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from ..utils.core.errors import ArchiveError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M"


def archive_name(prefix: str, instance_id: str, version: str, now: datetime) -> str:
    """
    Build the bundle file name, e.g. ``eks_i-0abc_2025-01-31_0915_0.0.4.tar.gz``.

    Args:
        prefix: Archive name prefix
        instance_id: Instance id, may be empty
        version: Program version
        now: Timestamp, converted to UTC

    Returns:
        str: Archive file name
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"{prefix}_{instance_id}_{now.strftime(TIMESTAMP_FORMAT)}_{version}.tar.gz"


def _numeric_owner(info: tarfile.TarInfo) -> tarfile.TarInfo:
    info.uname = ""
    info.gname = ""
    return info


def iter_members(root: Path) -> Iterator[Tuple[Path, str]]:
    """Yield ``(path, arcname)`` for everything below ``root`` in sorted order, parents first."""
    for current, dirnames, filenames in os.walk(root):
        dirnames.sort()
        current_path = Path(current)
        relative = current_path.relative_to(root)
        if relative != Path("."):
            yield current_path, f"./{relative.as_posix()}"
        for filename in sorted(filenames):
            path = current_path / filename
            yield path, f"./{path.relative_to(root).as_posix()}"


class Archiver:
    """
    Packs a working tree into ``<program_dir>/<archive name>``.
    """

    def __init__(self, program_dir: Union[str, Path], prefix: str = "eks"):
        self.program_dir = Path(program_dir)
        self.prefix = prefix

    def pack(self, root: Union[str, Path], instance_id: str, version: str, now: Optional[datetime] = None) -> Path:
        """
        Write every file under ``root`` into a new archive, paths relative to ``root``.

        The archive is written to a ``.partial`` file and renamed once complete,
        so the returned path never points at a truncated bundle.

        Args:
            root: Collected working tree
            instance_id: Instance id used in the archive name
            version: Program version used in the archive name
            now: Timestamp for the archive name, defaults to the current UTC time

        Returns:
            Path: Location of the written archive

        Raises:
            ArchiveError: If the tree cannot be read or the archive cannot be written
        """
        root = Path(root)
        if not root.is_dir():
            raise ArchiveError(f"Nothing to archive, {root} is not a directory")

        now = now or datetime.now(timezone.utc)
        target = self.program_dir / archive_name(self.prefix, instance_id, version, now)
        partial = target.with_name(target.name + ".partial")

        try:
            self.program_dir.mkdir(parents=True, exist_ok=True)
            with tarfile.open(partial, "w:gz") as tar:
                tar.add(root, arcname=".", recursive=False, filter=_numeric_owner)
                for path, arcname in iter_members(root):
                    tar.add(path, arcname=arcname, recursive=False, filter=_numeric_owner)
            os.replace(partial, target)
        except (OSError, tarfile.TarError) as e:
            partial.unlink(missing_ok=True)
            raise ArchiveError(f"Unable to create archive {target}: {e}") from e

        logger.info(f"Archive created: {target}")
        return target

    def cleanup(self, root: Union[str, Path]) -> None:
        """Remove the collected working tree."""
        root = Path(root)
        if root.exists():
            shutil.rmtree(root)
            logger.debug(f"Removed working tree {root}")
