# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Working directory layout for a collection run.
"""

import logging
import shutil
from pathlib import Path
from typing import Dict, Iterable, Tuple, Union

logger = logging.getLogger(__name__)


class CategoryTree:
    """
    One directory per category under the working root.

    Creating the tree is idempotent: existing directories and their
    contents are left as they are. A run starts from ``reset`` so nothing
    left behind by an interrupted run reaches the next bundle.
    """

    def __init__(self, root: Union[str, Path], categories: Iterable[str]):
        self.root = Path(root)
        self.categories: Tuple[str, ...] = tuple(dict.fromkeys(categories))

    def reset(self) -> None:
        """Remove the working root left over from an earlier run, if any."""
        if self.root.exists():
            logger.info(f"Removing leftover working tree {self.root}")
            shutil.rmtree(self.root)

    def create(self) -> Dict[str, Path]:
        """
        Create the root and every category directory.

        Returns:
            Dict[str, Path]: Category name to directory path
        """
        paths = self.paths()
        for path in paths.values():
            path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Category tree ready at {self.root}: {', '.join(self.categories)}")
        return paths

    def paths(self) -> Dict[str, Path]:
        return {category: self.root / category for category in self.categories}
