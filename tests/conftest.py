# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and shared fixtures for collector tests.

Every fixture points the collector at directories below ``tmp_path`` so no
test touches the real working root or program directory.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

from eks_log_collector.utils.config import (
    CollectorConfig,
    get_default_config_path,
    load_yaml_config,
    merge_configs,
)
from eks_log_collector.utils.core.context import InitKind, PackageManagerKind, RunContext
from eks_log_collector.utils.core.process import ProcessResult

STARTED_AT = datetime(2025, 1, 31, 9, 15, tzinfo=timezone.utc)


class FakeExecutor:
    """
    Stand-in for ProcessExecutor.

    Results are looked up by full command line, then by the first word;
    unknown commands succeed with empty output. ``stdout`` of a result is
    written into the output file when the caller streams into one.
    """

    def __init__(self, results: Optional[Dict[str, ProcessResult]] = None):
        self.results = results or {}
        self.calls: List[dict] = []

    def run(self, command, timeout=None, output=None, merge_stderr=False, env=None):
        command = list(command)
        self.calls.append({"command": command, "timeout": timeout, "merge_stderr": merge_stderr})
        template = self.results.get(" ".join(command)) or self.results.get(command[0])
        if template is None:
            template = ProcessResult(returncode=0)
        result = ProcessResult(
            returncode=template.returncode,
            stdout=template.stdout,
            stderr=template.stderr,
            command=command,
            execution_time=template.execution_time,
            timed_out=template.timed_out,
            not_found=template.not_found,
        )
        if output is not None and result.stdout:
            output.write(result.stdout.encode("utf-8"))
            return ProcessResult(
                returncode=result.returncode,
                stderr=result.stderr,
                command=command,
                execution_time=result.execution_time,
                timed_out=result.timed_out,
                not_found=result.not_found,
            )
        return result

    @property
    def commands(self) -> List[List[str]]:
        return [call["command"] for call in self.calls]


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_config(tmp_path, overrides: Optional[dict] = None) -> CollectorConfig:
    """Packaged defaults with every filesystem location moved below ``tmp_path``."""
    base = load_yaml_config(str(get_default_config_path()))
    local = {
        "program": {"directory": str(tmp_path / "program")},
        "collection": {
            "working_root": str(tmp_path / "work"),
            "var_log_dir": str(tmp_path / "var_log"),
            "disk": {"path": str(tmp_path)},
        },
        "docker": {"sysconfig": str(tmp_path / "sysconfig" / "docker")},
        "cni": {"config_dir": str(tmp_path / "cni")},
    }
    merged = merge_configs(base, local)
    if overrides:
        merged = merge_configs(merged, overrides)
    return CollectorConfig.from_dict(merged)


@pytest.fixture
def config(tmp_path):
    return build_config(tmp_path)


@pytest.fixture
def context(config):
    return RunContext(
        init_kind=InitKind.SYSTEMD,
        package_manager_kind=PackageManagerKind.RPM,
        instance_id="i-0abc",
        working_root=config.working_root,
        started_at=STARTED_AT,
    )


@pytest.fixture
def fake_executor():
    return FakeExecutor()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def which_all():
    """PATH lookup that finds every tool."""
    return lambda tool: f"/usr/bin/{tool}"


@pytest.fixture
def plenty_of_space():
    return lambda path: SimpleNamespace(free=10 * 1024 * 1024 * 1024)


@pytest.fixture
def make_executor():
    """Factory for FakeExecutor instances with canned results."""
    return FakeExecutor


@pytest.fixture
def make_config(tmp_path):
    """Factory for configurations with extra overrides."""
    return lambda overrides=None: build_config(tmp_path, overrides)
