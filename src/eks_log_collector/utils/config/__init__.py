# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Configuration utilities package.

Provides utilities for loading the collector configuration from the
packaged YAML defaults, an optional override file and package metadata.
"""

from .config import *
from .config_loader import *

# Re-export all functions and classes
__all__ = [
    # From config
    "CONFIG_ENV_VAR",
    "CollectorConfig",
    "load_collector_config",
    "load_yaml_config",
    "merge_configs",
    "validate_config_schema",
    "get_config_value",
    # From config_loader
    "get_dist_name",
    "get_dist_version",
    "get_configs_dir",
    "get_default_config_path",
]
