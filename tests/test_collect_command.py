# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the collect mode from detection to the archived bundle.
"""

import tarfile
from unittest.mock import Mock, patch

import pytest

from eks_log_collector.collection import Archiver, CollectionOrchestrator
from eks_log_collector.probes import build_default_registry
from eks_log_collector.probes.base import Probe, ProbeRegistry
from eks_log_collector.utils.cli.commands.collect import collect_logs, print_progress
from eks_log_collector.utils.core.errors import ArchiveError
from eks_log_collector.utils.core.process import ProcessResult
from eks_log_collector.utils.core.result import ProbeResult, ProbeStatus


def fake_detector(context):
    detector = Mock()
    detector.detect.return_value = context
    return detector


def small_registry():
    registry = ProbeRegistry()
    registry.register(
        Probe(
            name="instance_metadata",
            category="system",
            description="collect instance metadata",
            action=lambda session: session.write_text("instance-id.txt", session.context.instance_id),
        )
    )
    return registry


def bundle_contents(config):
    """Member name to file content (None for directories) of the single bundle."""
    bundles = list(config.program_dir.glob("eks_i-0abc_*.tar.gz"))
    assert len(bundles) == 1
    with tarfile.open(bundles[0], "r:gz") as tar:
        contents = {
            member.name: tar.extractfile(member).read() if member.isfile() else None for member in tar.getmembers()
        }
    bundles[0].unlink()
    return contents


@patch("eks_log_collector.probes.docker.is_process_running", return_value=False)
class TestRepeatedCollection:
    @pytest.fixture
    def run_collection(self, config, context, make_executor, which_all, plenty_of_space):
        executor = make_executor(
            {
                "sysctl": ProcessResult(returncode=0, stdout="kernel.x = 1\n"),
                "ip": ProcessResult(returncode=0, stdout="default via 10.0.0.1\n"),
            }
        )

        def run(archiver=None):
            orchestrator = CollectionOrchestrator(
                config,
                executor=executor,
                which=which_all,
                disk_usage=plenty_of_space,
                http_get=lambda url, timeout: f"{url}\n",
            )
            return collect_logs(
                config=config,
                registry=build_default_registry(config),
                detector=fake_detector(context),
                orchestrator=orchestrator,
                archiver=archiver,
                geteuid=lambda: 0,
            )

        return run

    def test_two_runs_produce_the_same_bundle(self, mock_running, config, run_collection):
        assert run_collection() == 0
        first = bundle_contents(config)
        assert run_collection() == 0
        second = bundle_contents(config)

        assert sorted(first) == sorted(second)
        assert first == second
        assert first["./sysctls/sysctl_all.txt"] == b"kernel.x = 1\n"

    def test_leftover_tree_does_not_reach_the_next_bundle(self, mock_running, config, context, run_collection):
        failing = Mock(spec=Archiver)
        failing.pack.side_effect = ArchiveError("No space left on device")
        assert run_collection(archiver=failing) == 1
        (context.working_root / "docker" / "container-oldgone.txt").write_text("stale")

        assert run_collection() == 0
        contents = bundle_contents(config)

        assert "./docker/container-oldgone.txt" not in contents
        assert contents["./sysctls/sysctl_all.txt"] == b"kernel.x = 1\n"
        assert contents["./networking/iproute.txt"].count(b"default via 10.0.0.1") == 1
        assert sorted(name for name, data in contents.items() if data is None) == sorted(
            ["."] + [f"./{category}" for category in config.categories]
        )


class TestCollectLogs:
    def test_full_run_produces_bundle_and_removes_tree(
        self, config, context, fake_executor, which_all, plenty_of_space, capsys
    ):
        orchestrator = CollectionOrchestrator(
            config, executor=fake_executor, which=which_all, disk_usage=plenty_of_space, progress=print_progress
        )

        code = collect_logs(
            config=config,
            registry=small_registry(),
            detector=fake_detector(context),
            orchestrator=orchestrator,
            geteuid=lambda: 0,
        )

        assert code == 0
        bundles = list(config.program_dir.glob("eks_i-0abc_*.tar.gz"))
        assert len(bundles) == 1
        with tarfile.open(bundles[0], "r:gz") as tar:
            assert tar.extractfile("./system/instance-id.txt").read() == b"i-0abc"
        assert not context.working_root.exists()

        out = capsys.readouterr().out
        assert "Trying to collect instance metadata... ok" in out
        assert f"your bundled logs are located in {bundles[0]}" in out
        assert f"Archive: {bundles[0]}" in out

    def test_non_root_writes_nothing(self, config, context):
        detector = fake_detector(context)

        assert collect_logs(config=config, detector=detector, geteuid=lambda: 1000) == 1

        detector.detect.assert_not_called()
        assert not context.working_root.exists()

    def test_fatal_precondition_returns_error(self, config, context, fake_executor, plenty_of_space):
        orchestrator = CollectionOrchestrator(
            config, executor=fake_executor, which=lambda tool: None, disk_usage=plenty_of_space
        )

        code = collect_logs(
            config=config,
            registry=small_registry(),
            detector=fake_detector(context),
            orchestrator=orchestrator,
            geteuid=lambda: 0,
        )

        assert code == 1
        assert not context.working_root.exists()
        assert not list(config.program_dir.glob("*.tar.gz"))

    def test_archive_failure_keeps_tree(self, config, context, fake_executor, which_all, plenty_of_space):
        archiver = Mock(spec=Archiver)
        archiver.pack.side_effect = ArchiveError("No space left on device")
        orchestrator = CollectionOrchestrator(config, executor=fake_executor, which=which_all, disk_usage=plenty_of_space)

        code = collect_logs(
            config=config,
            registry=small_registry(),
            detector=fake_detector(context),
            orchestrator=orchestrator,
            archiver=archiver,
            geteuid=lambda: 0,
        )

        assert code == 1
        archiver.cleanup.assert_not_called()
        assert (context.working_root / "system" / "instance-id.txt").exists()


class TestPrintProgress:
    def test_skip_message_is_shown(self, capsys):
        probe = Probe(name="packages", category="system", description="collect installed packages", action=print)

        print_progress("start", probe, None)
        print_progress("finish", probe, ProbeResult("packages", ProbeStatus.SKIPPED, "Unknown package type."))

        assert capsys.readouterr().out == "Trying to collect installed packages... skipped (Unknown package type.)\n"

    def test_success_detail_is_not_shown(self, capsys):
        probe = Probe(name="kernel", category="kernel", description="collect kernel logs", action=print)

        print_progress("start", probe, None)
        print_progress("finish", probe, ProbeResult("kernel", ProbeStatus.SUCCESS, "copied dmesg"))

        assert capsys.readouterr().out == "Trying to collect kernel logs... ok\n"
