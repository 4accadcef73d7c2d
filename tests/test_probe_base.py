# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Tests for Probe descriptors, probe sessions and the registry.
"""

from dataclasses import FrozenInstanceError

import pytest
import requests

from eks_log_collector.probes.base import Probe, ProbeRegistry, ProbeSession, select_init_kind
from eks_log_collector.utils.core.context import CollectionMode, InitKind
from eks_log_collector.utils.core.errors import ProbeTimeoutError, VariantNotSupportedError
from eks_log_collector.utils.core.process import ProcessResult


def noop(session):
    pass


def make_session(probe, context, config, executor, clock, http_get=None):
    session = ProbeSession(probe, context, config, executor, http_get=http_get or (lambda url, timeout: ""), clock=clock)
    session.directory.mkdir(parents=True, exist_ok=True)
    return session


class TestProbe:
    def test_requires_action_or_variants(self):
        with pytest.raises(ValueError):
            Probe(name="empty", category="system")

    def test_rejects_action_and_variants_together(self):
        with pytest.raises(ValueError):
            Probe(name="both", category="system", action=noop, variants={InitKind.SYSTEMD: noop}, selector=select_init_kind)

    def test_variants_need_selector(self):
        with pytest.raises(ValueError):
            Probe(name="variants", category="system", variants={InitKind.SYSTEMD: noop})

    def test_is_immutable(self):
        probe = Probe(name="p", category="system", action=noop)
        with pytest.raises(FrozenInstanceError):
            probe.name = "other"

    def test_resolve_variant(self, context):
        def systemd_action(session):
            pass

        probe = Probe(name="p", category="system", variants={InitKind.SYSTEMD: systemd_action}, selector=select_init_kind)
        assert probe.resolve(context) is systemd_action

    def test_resolve_unmatched_variant(self, context):
        probe = Probe(
            name="p",
            category="system",
            variants={InitKind.OTHER: noop},
            selector=select_init_kind,
            unsupported_message="Unable to determine active services.",
        )
        with pytest.raises(VariantNotSupportedError, match="Unable to determine active services."):
            probe.resolve(context)

    def test_with_overrides(self):
        probe = Probe(name="p", category="system", action=noop, command_timeout=75)

        changed = probe.with_overrides({"timeout": 30, "enabled": True})

        assert changed.timeout == 30
        assert changed.command_timeout == 75
        assert probe.timeout is None
        assert probe.with_overrides({}) is probe


class TestProbeSession:
    def test_run_streams_output_into_category(self, context, config, make_executor, fake_clock):
        executor = make_executor({"uname": ProcessResult(returncode=0, stdout="Linux node\n")})
        session = make_session(Probe(name="kernel", category="kernel", action=noop), context, config, executor, fake_clock)

        session.run(["uname", "-a"], output="uname.txt")

        target = context.working_root / "kernel" / "uname.txt"
        assert target.read_text() == "Linux node\n"
        assert session.artifacts == [target]
        assert session.failures == []

    def test_non_zero_exit_is_recorded(self, context, config, make_executor, fake_clock):
        executor = make_executor({"lvs": ProcessResult(returncode=5, stderr="no volume groups")})
        session = make_session(Probe(name="mounts", category="storage", action=noop), context, config, executor, fake_clock)

        session.run(["lvs"], output="lvs.txt")

        assert len(session.failures) == 1
        assert "no volume groups" in session.failures[0]

    def test_unchecked_failure_is_not_recorded(self, context, config, make_executor, fake_clock):
        executor = make_executor({"systemctl": ProcessResult(returncode=1)})
        session = make_session(Probe(name="kubelet", category="kubelet", action=noop), context, config, executor, fake_clock)

        session.run(["systemctl", "cat", "kubelet"], output="kubelet_service.txt", check=False)

        assert session.failures == []

    def test_command_timeout_is_recorded_separately(self, context, config, make_executor, fake_clock):
        executor = make_executor({"docker": ProcessResult(returncode=-1, timed_out=True, execution_time=75)})
        session = make_session(Probe(name="docker_info", category="docker", action=noop), context, config, executor, fake_clock)

        session.run(["docker", "info"], output="docker-info.txt")

        assert len(session.timeouts) == 1
        assert session.failures == []

    def test_command_bound_is_probe_command_timeout(self, context, config, fake_executor, fake_clock):
        probe = Probe(name="p", category="system", action=noop, command_timeout=75)
        session = make_session(probe, context, config, fake_executor, fake_clock)

        session.run(["ps", "fauxwww"])

        assert fake_executor.calls[-1]["timeout"] == 75

    def test_command_bound_is_capped_by_remaining_budget(self, context, config, fake_executor, fake_clock):
        probe = Probe(name="p", category="system", action=noop, timeout=100, command_timeout=75)
        session = make_session(probe, context, config, fake_executor, fake_clock)
        fake_clock.advance(90)

        session.run(["ps", "fauxwww"])

        assert fake_executor.calls[-1]["timeout"] == pytest.approx(10)

    def test_unbounded_probe_passes_no_timeout(self, context, config, fake_executor, fake_clock):
        session = make_session(Probe(name="p", category="system", action=noop), context, config, fake_executor, fake_clock)

        session.run(["rpm", "-qa"])

        assert fake_executor.calls[-1]["timeout"] is None

    def test_expired_deadline_stops_probe(self, context, config, fake_executor, fake_clock):
        probe = Probe(name="p", category="system", action=noop, timeout=10)
        session = make_session(probe, context, config, fake_executor, fake_clock)
        fake_clock.advance(11)

        with pytest.raises(ProbeTimeoutError):
            session.run(["rpm", "-qa"])
        assert fake_executor.calls == []

    def test_copy_directory_follows_symlinks(self, tmp_path, context, config, fake_executor, fake_clock):
        source = tmp_path / "var_log" / "pods"
        source.mkdir(parents=True)
        real = tmp_path / "real.log"
        real.write_text("pod output\n")
        (source / "app.log").symlink_to(real)

        session = make_session(Probe(name="common_logs", category="var_log", action=noop), context, config, fake_executor, fake_clock)

        assert session.copy(source) is True
        copied = context.working_root / "var_log" / "pods" / "app.log"
        assert copied.read_text() == "pod output\n"
        assert not copied.is_symlink()

    def test_copy_missing_source(self, tmp_path, context, config, fake_executor, fake_clock):
        session = make_session(Probe(name="common_logs", category="var_log", action=noop), context, config, fake_executor, fake_clock)

        assert session.copy(tmp_path / "absent.log") is False
        assert session.failures == []

    def test_copy_contents(self, tmp_path, context, config, fake_executor, fake_clock):
        cni = tmp_path / "cni"
        cni.mkdir()
        (cni / "10-aws.conflist").write_text("{}")
        (cni / "99-loopback.conf").write_text("{}")
        session = make_session(Probe(name="cni", category="cni", action=noop), context, config, fake_executor, fake_clock)

        assert session.copy_contents(cni) == 2
        assert sorted(p.name for p in (context.working_root / "cni").iterdir()) == ["10-aws.conflist", "99-loopback.conf"]

    def test_fetch_writes_body(self, context, config, fake_executor, fake_clock):
        session = make_session(
            Probe(name="ipamd", category="ipamd", action=noop),
            context,
            config,
            fake_executor,
            fake_clock,
            http_get=lambda url, timeout: f"body of {url}",
        )

        assert session.fetch("http://localhost:61678/metrics", "metrics.txt", timeout=3)
        assert (context.working_root / "ipamd" / "metrics.txt").read_text() == "body of http://localhost:61678/metrics"

    def test_fetch_error_is_recorded(self, context, config, fake_executor, fake_clock):
        def refuse(url, timeout):
            raise requests.exceptions.ConnectionError("connection refused")

        session = make_session(
            Probe(name="ipamd", category="ipamd", action=noop), context, config, fake_executor, fake_clock, http_get=refuse
        )

        assert session.fetch("http://localhost:61678/v1/enis", "enis.txt") is False
        assert len(session.failures) == 1
        assert not (context.working_root / "ipamd" / "enis.txt").exists()


class TestProbeRegistry:
    def test_keeps_registration_order(self):
        registry = ProbeRegistry()
        for name in ("b", "a", "c"):
            registry.register(Probe(name=name, category="system", action=noop))

        assert [probe.name for probe in registry.for_mode(CollectionMode.COLLECT)] == ["b", "a", "c"]
        assert len(registry) == 3
        assert "a" in registry

    def test_duplicate_name_rejected(self):
        registry = ProbeRegistry()
        registry.register(Probe(name="kernel", category="kernel", action=noop))

        with pytest.raises(ValueError, match="already registered"):
            registry.register(Probe(name="kernel", category="kernel", action=noop))

    def test_modes_filter_probes(self):
        registry = ProbeRegistry()
        registry.register(Probe(name="kernel", category="kernel", action=noop))

        assert registry.for_mode(CollectionMode.ENABLE_DEBUG) == ()

    def test_categories_in_first_use_order(self):
        registry = ProbeRegistry()
        registry.register(Probe(name="a", category="system", action=noop))
        registry.register(Probe(name="b", category="docker", action=noop))
        registry.register(Probe(name="c", category="system", action=noop))

        assert registry.categories() == ("system", "docker")
