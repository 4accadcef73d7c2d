# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Storage probes: mount points, filesystem usage, block devices and LVM state.
"""

from .base import ProbeSession

VOLUME_COMMANDS = ("lsblk", "lvs", "pvs", "vgs")


def collect_mounts(session: ProbeSession) -> None:
    session.run(["mount"], output="mounts.txt")
    session.write_text("mounts.txt", "\n", append=True)
    session.run(["df", "--human-readable"], output="mounts.txt", append=True)
    for command in VOLUME_COMMANDS:
        session.run([command], output=f"{command}.txt")
