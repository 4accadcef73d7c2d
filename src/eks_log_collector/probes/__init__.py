# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Probe package.

Contains the probe framework and the built-in probes that gather
operating system, Docker and Kubernetes node state.
"""

from .base import Probe, ProbeRegistry, ProbeSession, always, select_init_kind, select_package_manager
from .docker import DebugToggleOutcome, enable_docker_debug
from .registry import build_default_registry, default_probes

__all__ = [
    "Probe",
    "ProbeRegistry",
    "ProbeSession",
    "always",
    "select_init_kind",
    "select_package_manager",
    "DebugToggleOutcome",
    "enable_docker_debug",
    "build_default_registry",
    "default_probes",
]
