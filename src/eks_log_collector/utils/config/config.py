# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Utilities for handling the collector configuration.

The packaged ``collector.yml`` holds every path, threshold and endpoint the
collector uses. An operator supplied YAML file (EKS_LOG_COLLECTOR_CONFIG)
is merged on top of it, and the result is exposed as a frozen
CollectorConfig so that nothing downstream mutates it.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .config_loader import get_default_config_path, get_dist_version

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EKS_LOG_COLLECTOR_CONFIG"


@dataclass(frozen=True)
class CollectorConfig:
    """Typed view of the merged collector configuration."""

    program_name: str
    version: str
    source_url: str
    program_dir: Path
    logs_dir: Path
    working_root: Path
    archive_prefix: str
    journal_since_days: int
    var_log_dir: Path
    disk_check_path: str
    min_free_kb: int
    required_utils: Tuple[str, ...]
    categories: Tuple[str, ...]
    common_logs: Tuple[str, ...]
    command_timeout: Optional[float]
    metadata_timeout: float
    introspection_timeout: float
    kill_grace: float
    instance_metadata_url: str
    metadata_token_url: Optional[str]
    ipamd_url: str
    ipamd_resources: Tuple[str, ...]
    docker_daemon_process: str
    docker_sysconfig: Path
    cni_config_dir: Path
    probe_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def probe_override(self, probe_name: str) -> Dict[str, Any]:
        """Overrides configured for ``probe_name``, empty when there are none."""
        return dict(self.probe_overrides.get(probe_name) or {})

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "CollectorConfig":
        """
        Build a CollectorConfig from a raw configuration dictionary.

        Raises:
            ValueError: If a mandatory key is missing
        """
        missing = validate_config_schema(
            config,
            [
                "program.name",
                "program.directory",
                "collection.working_root",
                "collection.archive_prefix",
                "collection.categories",
                "endpoints.instance_metadata",
                "endpoints.ipamd",
            ],
        )
        if missing:
            raise ValueError(f"Missing configuration keys: {', '.join(missing)}")

        program_dir = Path(get_config_value(config, "program.directory"))
        version = str(get_config_value(config, "program.version", ""))
        dist_version = get_dist_version()
        if dist_version != "unknown":
            version = dist_version

        return cls(
            program_name=get_config_value(config, "program.name"),
            version=version or "unknown",
            source_url=get_config_value(config, "program.source", ""),
            program_dir=program_dir,
            logs_dir=program_dir / get_config_value(config, "program.logs_subdir", "logs"),
            working_root=Path(get_config_value(config, "collection.working_root")),
            archive_prefix=get_config_value(config, "collection.archive_prefix"),
            journal_since_days=int(get_config_value(config, "collection.journal_since_days", 7)),
            var_log_dir=Path(get_config_value(config, "collection.var_log_dir", "/var/log")),
            disk_check_path=str(get_config_value(config, "collection.disk.path", "/")),
            min_free_kb=int(get_config_value(config, "collection.disk.min_free_kb", 1500000)),
            required_utils=tuple(get_config_value(config, "collection.required_utils", []) or []),
            categories=tuple(get_config_value(config, "collection.categories")),
            common_logs=tuple(get_config_value(config, "collection.common_logs", []) or []),
            command_timeout=_optional_float(get_config_value(config, "timeouts.command", 75)),
            metadata_timeout=float(get_config_value(config, "timeouts.metadata", 3)),
            introspection_timeout=float(get_config_value(config, "timeouts.introspection", 3)),
            kill_grace=float(get_config_value(config, "timeouts.kill_grace", 5)),
            instance_metadata_url=get_config_value(config, "endpoints.instance_metadata"),
            metadata_token_url=get_config_value(config, "endpoints.metadata_token"),
            ipamd_url=str(get_config_value(config, "endpoints.ipamd")).rstrip("/"),
            ipamd_resources=tuple(get_config_value(config, "endpoints.ipamd_resources", []) or []),
            docker_daemon_process=get_config_value(config, "docker.daemon_process", "dockerd"),
            docker_sysconfig=Path(get_config_value(config, "docker.sysconfig", "/etc/sysconfig/docker")),
            cni_config_dir=Path(get_config_value(config, "cni.config_dir", "/etc/cni/net.d")),
            probe_overrides=dict(get_config_value(config, "probes", {}) or {}),
        )


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        Dict containing the configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as file:
            config = yaml.safe_load(file)
            return config if config is not None else {}
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Invalid YAML in {config_path}: {e}")


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries.

    Args:
        base_config: Base configuration
        override_config: Configuration to override base with

    Returns:
        Merged configuration dictionary
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def validate_config_schema(config: Dict[str, Any], required_keys: list) -> list:
    """
    Return the dot-separated ``required_keys`` that are absent from ``config``.
    """
    sentinel = object()
    return [key for key in required_keys if get_config_value(config, key, sentinel) is sentinel]


def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get a configuration value using dot notation.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path to the value (e.g., "timeouts.command")
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    keys = key_path.split(".")
    value = config

    try:
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError):
        return default


def load_collector_config(config_path: Optional[str] = None) -> CollectorConfig:
    """
    Load the packaged defaults and apply the optional override file.

    Args:
        config_path: Override file; defaults to the EKS_LOG_COLLECTOR_CONFIG environment variable

    Returns:
        CollectorConfig: The merged configuration
    """
    config = load_yaml_config(str(get_default_config_path()))

    override_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if override_path:
        logger.debug(f"Applying configuration overrides from {override_path}")
        config = merge_configs(config, load_yaml_config(override_path))

    return CollectorConfig.from_dict(config)
