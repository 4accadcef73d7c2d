# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Kubernetes node agent probes: kubelet and kube-proxy state, the L-IPAMD
introspection endpoint of the VPC CNI plugin and the CNI configuration.
"""

import logging

from ..utils.core.context import InitKind
from .base import ProbeSession

logger = logging.getLogger(__name__)

JOURNAL_UNITS = (
    ("kubelet", "kubelet.log"),
    ("kubeproxy", "kubeproxy.log"),
)

SERVICE_UNITS = ("kubelet", "kube-proxy")


def collect_kubelet_systemd(session: ProbeSession) -> None:
    since = session.context.since(session.config.journal_since_days)
    for unit, output in JOURNAL_UNITS:
        session.run(["journalctl", f"--unit={unit}", "--since", since], output=output)
    session.run(["kubectl", "config", "view", "--output", "yaml"], output="kubeconfig.yaml")
    # systemctl errors for absent units are part of the captured output
    for unit in SERVICE_UNITS:
        session.run(["systemctl", "cat", unit], output=f"{unit}_service.txt", merge_stderr=True, timeout=None, check=False)


KUBELET_VARIANTS = {
    InitKind.SYSTEMD: collect_kubelet_systemd,
}


def collect_ipamd(session: ProbeSession) -> None:
    """Save the L-IPAMD introspection resources and its metrics."""
    base_url = session.config.ipamd_url
    timeout = session.config.introspection_timeout
    for resource in session.config.ipamd_resources:
        session.fetch(f"{base_url}/v1/{resource}", f"{resource}.txt", append=True, timeout=timeout)
    session.fetch(f"{base_url}/metrics", "metrics.txt", timeout=timeout)


def collect_cni_config(session: ProbeSession) -> None:
    copied = session.copy_contents(session.config.cni_config_dir)
    logger.debug(f"Copied {copied} CNI configuration entries")
