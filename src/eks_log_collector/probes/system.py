# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Operating system probes: instance metadata, common logs, SELinux status,
installed packages, services and process snapshots.
"""

import logging

from ..utils.core.context import InitKind, PackageManagerKind
from .base import ProbeSession

logger = logging.getLogger(__name__)

PROCESS_SNAPSHOTS = (
    (["top", "-b", "-n", "1"], "top.txt"),
    (["ps", "fauxwww"], "ps.txt"),
    (["netstat", "-plant"], "netstat.txt"),
)


def collect_instance_id(session: ProbeSession) -> None:
    session.write_text("instance-id.txt", f"{session.context.instance_id}\n")


def collect_common_logs(session: ProbeSession) -> None:
    """Copy the well-known log files and directories that exist under /var/log."""
    copied = [entry for entry in session.config.common_logs if session.copy(session.config.var_log_dir / entry)]
    logger.debug(f"Copied common logs: {copied}")


def collect_selinux_status(session: ProbeSession) -> None:
    result = session.run(["getenforce"], check=False)
    if result.not_found:
        mode = "Not installed"
    elif result.success:
        mode = result.stdout.strip()
    else:
        session.record_failure(result.describe_failure())
        mode = result.stderr.strip() or "Unknown"
    session.write_text("selinux.txt", f"SELinux mode:\n\t {mode}\n")


def collect_rpm_packages(session: ProbeSession) -> None:
    session.run(["rpm", "-qa"], output="pkglist.txt", merge_stderr=True)


def collect_deb_packages(session: ProbeSession) -> None:
    session.run(["dpkg", "--list"], output="pkglist.txt", merge_stderr=True)


PACKAGE_LIST_VARIANTS = {
    PackageManagerKind.RPM: collect_rpm_packages,
    PackageManagerKind.DEB: collect_deb_packages,
}


def collect_systemd_services(session: ProbeSession) -> None:
    session.run(["systemctl", "list-units"], output="services.txt", merge_stderr=True)


def collect_legacy_services(session: ProbeSession) -> None:
    """Dump every upstart job configuration followed by the SysV service status."""
    jobs = session.run(["initctl", "list"])
    if jobs.success:
        session.write_text("services.txt", "")
        for line in jobs.stdout.splitlines():
            fields = line.split()
            if fields:
                session.run(["initctl", "show-config", fields[0]], output="services.txt", append=True, merge_stderr=True)
    session.write_text("services.txt", "\n\n\n\n", append=True)
    session.run(["service", "--status-all"], output="services.txt", append=True, merge_stderr=True)


SERVICE_VARIANTS = {
    InitKind.SYSTEMD: collect_systemd_services,
    InitKind.OTHER: collect_legacy_services,
}


def collect_process_snapshots(session: ProbeSession) -> None:
    for command, output in PROCESS_SNAPSHOTS:
        session.run(command, output=output, merge_stderr=True)
