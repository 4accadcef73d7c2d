# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the Docker debug toggle and the enable_debug mode.
"""

from dataclasses import replace
from unittest.mock import Mock

import pytest

from eks_log_collector.probes.docker import DEBUG_OPTIONS_LINE, DebugToggleOutcome, enable_docker_debug
from eks_log_collector.utils.cli.commands.enable_debug import confirm, enable_debug
from eks_log_collector.utils.core.context import PackageManagerKind
from eks_log_collector.utils.core.errors import ConfirmationDeclinedError
from eks_log_collector.utils.core.process import ProcessResult

SYSCONFIG = '# Additional startup options for the Docker daemon\nOPTIONS="--default-ulimit nofile=1024:4096"\n'


@pytest.fixture
def sysconfig(config):
    config.docker_sysconfig.parent.mkdir(parents=True)
    config.docker_sysconfig.write_text(SYSCONFIG)
    return config.docker_sysconfig


def fake_detector(context):
    detector = Mock()
    detector.detect.return_value = context
    return detector


class TestEnableDockerDebug:
    def test_appends_flag_and_restarts(self, context, config, sysconfig, fake_executor):
        outcome = enable_docker_debug(context, config, fake_executor)

        assert outcome == DebugToggleOutcome.ENABLED
        assert sysconfig.read_text() == SYSCONFIG + DEBUG_OPTIONS_LINE
        assert fake_executor.commands == [["service", "docker", "restart"]]

    def test_already_enabled_is_left_alone(self, context, config, sysconfig, fake_executor):
        sysconfig.write_text(SYSCONFIG + DEBUG_OPTIONS_LINE)

        outcome = enable_docker_debug(context, config, fake_executor)

        assert outcome == DebugToggleOutcome.ALREADY_ENABLED
        assert outcome.debug_enabled
        assert sysconfig.read_text() == SYSCONFIG + DEBUG_OPTIONS_LINE
        assert fake_executor.calls == []

    def test_non_rpm_host_is_not_supported(self, context, config, sysconfig, fake_executor):
        outcome = enable_docker_debug(replace(context, package_manager_kind=PackageManagerKind.DEB), config, fake_executor)

        assert outcome == DebugToggleOutcome.UNSUPPORTED
        assert sysconfig.read_text() == SYSCONFIG

    def test_missing_sysconfig(self, context, config, fake_executor):
        assert enable_docker_debug(context, config, fake_executor) == DebugToggleOutcome.NOT_CONFIGURED
        assert fake_executor.calls == []

    def test_restart_failure(self, context, config, sysconfig, make_executor):
        executor = make_executor({"service": ProcessResult(returncode=1, stderr="Redirecting to /bin/systemctl")})

        assert enable_docker_debug(context, config, executor) == DebugToggleOutcome.RESTART_FAILED


class TestConfirm:
    @pytest.mark.parametrize("answer", ["y", "Y", "yes", "YES", " yes "])
    def test_yes_proceeds(self, answer):
        confirm(answer_func=lambda: answer.strip())

    @pytest.mark.parametrize("answer", ["", "n", "no", "maybe"])
    def test_anything_else_declines(self, answer):
        with pytest.raises(ConfirmationDeclinedError, match='"No" was selected.'):
            confirm(answer_func=lambda: answer)

    def test_force_skips_prompt(self):
        prompt = Mock()
        confirm(force=True, answer_func=prompt)
        prompt.assert_not_called()


class TestEnableDebugCommand:
    def run_command(self, config, context, executor, answer, **kwargs):
        return enable_debug(
            config=config,
            detector=fake_detector(context),
            executor=executor,
            answer_func=lambda: answer,
            which=lambda tool: f"/usr/bin/{tool}",
            geteuid=lambda: 0,
            **kwargs,
        )

    def test_declined_confirmation_changes_nothing(self, config, context, sysconfig, fake_executor):
        assert self.run_command(config, context, fake_executor, "n") == 1

        assert sysconfig.read_text() == SYSCONFIG
        assert fake_executor.calls == []

    def test_confirmed(self, config, context, sysconfig, fake_executor, capsys):
        assert self.run_command(config, context, fake_executor, "y") == 0

        assert DEBUG_OPTIONS_LINE in sysconfig.read_text()
        assert "Debug mode is enabled" in capsys.readouterr().out

    def test_force(self, config, context, sysconfig, fake_executor):
        assert self.run_command(config, context, fake_executor, "n", force=True) == 0
        assert DEBUG_OPTIONS_LINE in sysconfig.read_text()

    def test_non_root(self, config, context, sysconfig, fake_executor):
        detector = fake_detector(context)

        code = enable_debug(config=config, detector=detector, executor=fake_executor, geteuid=lambda: 1000)

        assert code == 1
        detector.detect.assert_not_called()

    def test_missing_tool(self, config, context, sysconfig, fake_executor):
        detector = fake_detector(context)

        code = enable_debug(
            config=config,
            force=True,
            detector=detector,
            executor=fake_executor,
            which=lambda tool: None,
            geteuid=lambda: 0,
        )

        assert code == 1
        assert sysconfig.read_text() == SYSCONFIG
