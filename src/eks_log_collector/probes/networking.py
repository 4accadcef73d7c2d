# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Networking probes: packet filter rules, interfaces, policy routing rules
and routing tables.
"""

from .base import ProbeSession

IPTABLES_TABLES = ("filter", "nat")


def collect_iptables(session: ProbeSession) -> None:
    for table in IPTABLES_TABLES:
        session.run(
            ["iptables", "--numeric", "--verbose", "--list", "--table", table],
            output=f"iptables-{table}.txt",
        )
    session.run(["iptables-save"], output="iptables-save.out")


def collect_interfaces_and_routes(session: ProbeSession) -> None:
    session.run(["ifconfig"], output="ifconfig.txt")
    session.run(["ip", "rule", "show"], output="iprule.txt")
    session.run(["ip", "route", "show", "table", "all"], output="iproute.txt", append=True)
