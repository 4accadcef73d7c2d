# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Configuration loader utilities.

This module provides utilities for locating the packaged configuration
files and reading package metadata such as the distribution version.
"""

import importlib.metadata
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "collector.yml"


def get_dist_name() -> Optional[str]:
    """Get the distribution name for the current package."""
    pkg = __name__.split(".", 1)[0]
    mapping = importlib.metadata.packages_distributions()
    return mapping.get(pkg, [None])[0]


def get_dist_version(dist: Optional[str] = None) -> str:
    """Get the version of a distribution."""
    if not dist:
        dist = get_dist_name()
    if not dist:
        return "unknown"
    try:
        return importlib.metadata.version(dist)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_configs_dir() -> Path:
    """Directory holding the configuration files shipped with the package."""
    import eks_log_collector

    return Path(eks_log_collector.__file__).parent / "configs"


def get_default_config_path() -> Path:
    """Path of the packaged default collector configuration."""
    return get_configs_dir() / DEFAULT_CONFIG_FILENAME
