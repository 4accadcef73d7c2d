# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Collection pipeline: category tree, orchestrator and archiver.
"""

from .archiver import Archiver, archive_name
from .category_tree import CategoryTree
from .orchestrator import CollectionOrchestrator

__all__ = ["Archiver", "archive_name", "CategoryTree", "CollectionOrchestrator"]
