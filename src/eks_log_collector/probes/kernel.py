# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Kernel probes: ring buffer, boot messages, kernel version and sysctls.
"""

from .base import ProbeSession


def collect_kernel_info(session: ProbeSession) -> None:
    session.copy(session.config.var_log_dir / "dmesg", "dmesg.boot")
    session.run(["dmesg"], output="dmesg.current")
    session.run(["dmesg", "--ctime"], output="dmesg.human.current")
    session.run(["uname", "-a"], output="uname.txt")


def collect_sysctls(session: ProbeSession) -> None:
    session.run(["sysctl", "--all"], output="sysctl_all.txt", append=True)
