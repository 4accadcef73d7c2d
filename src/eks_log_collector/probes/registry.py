# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Built-in probe set.

The registration order below is the order probes run in: cheap and
universal first, slow container inspection and runtime logs last. No probe
depends on another probe's output; the order only keeps the bundle layout
reproducible.
"""

import logging
from typing import List

from ..utils.core.context import CollectionMode
from . import docker, kernel, kubernetes, networking, storage, system
from .base import Probe, ProbeRegistry, select_init_kind, select_package_manager

logger = logging.getLogger(__name__)


def default_probes(config) -> List[Probe]:
    """
    Build the collect-mode probes in registration order.

    Args:
        config: Collector configuration supplying paths and timeouts

    Returns:
        List[Probe]: Probe descriptors, not yet filtered by configuration
    """
    slow = config.command_timeout
    dockerd = docker.docker_running(config.docker_daemon_process)
    docker_down = "The Docker daemon is not running."

    return [
        Probe(
            name="instance_metadata",
            category="system",
            description="collect instance metadata",
            action=system.collect_instance_id,
        ),
        Probe(
            name="common_logs",
            category="var_log",
            description="collect common operating system logs",
            action=system.collect_common_logs,
        ),
        Probe(
            name="kernel",
            category="kernel",
            description="collect kernel logs",
            action=kernel.collect_kernel_info,
        ),
        Probe(
            name="mounts",
            category="storage",
            description="collect mount points and volume information",
            action=storage.collect_mounts,
        ),
        Probe(
            name="selinux",
            category="system",
            description="collect SELinux status",
            action=system.collect_selinux_status,
        ),
        Probe(
            name="iptables",
            category="networking",
            description="collect iptables information",
            action=networking.collect_iptables,
        ),
        Probe(
            name="packages",
            category="system",
            description="collect installed packages",
            variants=system.PACKAGE_LIST_VARIANTS,
            selector=select_package_manager,
            unsupported_message="Unknown package type.",
        ),
        Probe(
            name="services",
            category="system",
            description="collect active system services",
            variants=system.SERVICE_VARIANTS,
            selector=select_init_kind,
            unsupported_message="Unable to determine active services.",
        ),
        Probe(
            name="processes",
            category="system",
            description="collect process and socket snapshots",
            action=system.collect_process_snapshots,
            command_timeout=slow,
        ),
        Probe(
            name="docker_info",
            category="docker",
            description="collect Docker daemon information",
            action=docker.collect_docker_info,
            capability=dockerd,
            skip_message=docker_down,
            command_timeout=slow,
        ),
        Probe(
            name="kubelet",
            category="kubelet",
            description="collect kubelet information",
            variants=kubernetes.KUBELET_VARIANTS,
            selector=select_init_kind,
            command_timeout=slow,
        ),
        Probe(
            name="ipamd",
            category="ipamd",
            description="collect L-IPAMD information",
            action=kubernetes.collect_ipamd,
        ),
        Probe(
            name="sysctls",
            category="sysctls",
            description="collect sysctls information",
            action=kernel.collect_sysctls,
        ),
        Probe(
            name="networking",
            category="networking",
            description="collect networking information",
            action=networking.collect_interfaces_and_routes,
            command_timeout=slow,
        ),
        Probe(
            name="cni",
            category="cni",
            description="collect CNI configuration information",
            action=kubernetes.collect_cni_config,
            capability=lambda context: config.cni_config_dir.is_dir(),
            skip_message=f"{config.cni_config_dir} does not exist.",
        ),
        Probe(
            name="containers",
            category="docker",
            description="collect running Docker containers and gather container data",
            action=docker.collect_containers,
            capability=dockerd,
            skip_message=docker_down,
            command_timeout=slow,
        ),
        Probe(
            name="docker_logs",
            category="docker",
            description="collect Docker daemon logs",
            variants=docker.DOCKER_LOG_VARIANTS,
            selector=select_init_kind,
        ),
    ]


def build_default_registry(config) -> ProbeRegistry:
    """
    Register the built-in probes, applying per-probe configuration overrides.

    A probe configured with ``enabled: false`` is left out; ``timeout`` and
    ``command_timeout`` replace the built-in bounds.

    Args:
        config: Collector configuration

    Returns:
        ProbeRegistry: Registry holding the collect-mode probes
    """
    registry = ProbeRegistry()
    for probe in default_probes(config):
        overrides = config.probe_override(probe.name)
        if overrides.get("enabled", True) is False:
            logger.info(f"Probe {probe.name} disabled by configuration")
            continue
        registry.register(probe.with_overrides(overrides), modes=(CollectionMode.COLLECT,))
    return registry
