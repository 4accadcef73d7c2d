# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Collect command implementation.

Runs every collect-mode probe, bundles the working tree into an archive in
the program directory and removes the working tree afterwards.
"""

import logging
import os
from typing import Callable, Optional

from eks_log_collector.collection import Archiver, CollectionOrchestrator
from eks_log_collector.probes import build_default_registry
from eks_log_collector.probes.base import Probe, ProbeRegistry
from eks_log_collector.utils.config import CollectorConfig, load_collector_config
from eks_log_collector.utils.core.context import CollectionMode
from eks_log_collector.utils.core.errors import CollectorError
from eks_log_collector.utils.core.preconditions import check_root
from eks_log_collector.utils.core.result import ProbeResult, ProbeStatus
from eks_log_collector.utils.logging import setup_command_logging
from eks_log_collector.utils.reporting import RunSummaryTableGenerator
from eks_log_collector.utils.system import EnvironmentDetector

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    ProbeStatus.SUCCESS: "ok",
    ProbeStatus.PARTIAL: "partial",
    ProbeStatus.SKIPPED: "skipped",
    ProbeStatus.TIMED_OUT: "timed out",
    ProbeStatus.FAILED: "failed",
}


def print_banner(config: CollectorConfig) -> None:
    print(f"\n\tThis is version {config.version}. New versions can be found at {config.source_url}\n")


def print_progress(event: str, probe: Probe, result: Optional[ProbeResult]) -> None:
    """Console progress in the form ``Trying to <description>... ok``."""
    if event == "start":
        print(f"Trying to {probe.description}... ", end="", flush=True)
    elif result is not None:
        label = STATUS_LABELS[result.status]
        if result.message and not result.ok:
            label = f"{label} ({result.message.splitlines()[0]})"
        print(label, flush=True)


def collect_logs(
    config: Optional[CollectorConfig] = None,
    verbose: bool = False,
    debug: bool = False,
    registry: Optional[ProbeRegistry] = None,
    detector: Optional[EnvironmentDetector] = None,
    orchestrator: Optional[CollectionOrchestrator] = None,
    archiver: Optional[Archiver] = None,
    geteuid: Callable[[], int] = os.geteuid,
) -> int:
    """
    Collect node logs into a compressed bundle.

    Args:
        config: Collector configuration, loaded from the packaged defaults when None
        verbose: Whether to show more detailed output
        debug: Whether to show debug level logs
        registry: Probe registry, the built-in probes when None
        detector: Environment detector, built from the configuration when None
        orchestrator: Orchestrator running the probes, built from the configuration when None
        archiver: Archiver writing the bundle, built from the configuration when None
        geteuid: Effective user id lookup used for the root check

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    try:
        config = config or load_collector_config()
        print_banner(config)
        check_root(geteuid)

        log_file = setup_command_logging(
            "collect", logs_dir=str(config.logs_dir), program_name=config.program_name, verbose=verbose, debug=debug
        )
        if log_file:
            logger.info(f"Logging to {log_file}")

        registry = registry or build_default_registry(config)
        detector = detector or EnvironmentDetector.from_config(config)
        orchestrator = orchestrator or CollectionOrchestrator(config, progress=print_progress)
        archiver = archiver or Archiver(config.program_dir, config.archive_prefix)

        context = detector.detect()
        report = orchestrator.run(CollectionMode.COLLECT, registry, context)

        print("Trying to archive gathered information... ", end="", flush=True)
        archive_path = archiver.pack(context.working_root, context.instance_id, config.version)
        print("ok", flush=True)
        archiver.cleanup(context.working_root)

        print()
        print(RunSummaryTableGenerator(report, archive_path=str(archive_path)).generate())
        print(f"\n\tDone... your bundled logs are located in {archive_path}\n")
        return 0

    except CollectorError as e:
        logger.error(str(e))
        logger.debug("Collection aborted", exc_info=debug)
        return 1
    except Exception as e:
        logger.error(f"Log collection failed: {e}")
        logger.debug("Unexpected error", exc_info=True)
        return 1
