# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Collection orchestrator.

Runs the probes registered for a mode one after another against the
category tree, after checking the fatal preconditions. A probe can only
affect its own ProbeResult: every error raised inside a probe is converted
into a result entry and the loop moves on. Interrupts are the exception;
KeyboardInterrupt and SystemExit propagate to the signal handling of the
command layer.
"""

import logging
import shutil
import time
from typing import Callable, Optional

import psutil

from ..probes.base import Probe, ProbeRegistry, ProbeSession
from ..utils.core.context import CollectionMode, RunContext
from ..utils.core.errors import ProbeTimeoutError, VariantNotSupportedError
from ..utils.core.preconditions import check_disk_space, check_required_tools
from ..utils.core.process import ProcessExecutor, get_executor
from ..utils.core.result import ProbeResult, ProbeStatus, RunReport
from ..utils.infrastructure.network import fetch_text
from .category_tree import CategoryTree

logger = logging.getLogger(__name__)

# Progress callback: (event, probe, result), event is "start" or "finish"
ProgressCallback = Callable[[str, Probe, Optional[ProbeResult]], None]


class CollectionOrchestrator:
    """
    Drives one collection run.

    All host access that matters for the fatal checks and for probe
    execution is injectable: ``which`` and ``disk_usage`` for the
    preconditions, ``executor`` and ``http_get`` for the probes.
    """

    def __init__(
        self,
        config,
        executor: Optional[ProcessExecutor] = None,
        which: Callable = shutil.which,
        disk_usage: Callable = psutil.disk_usage,
        http_get: Callable[..., str] = fetch_text,
        clock: Callable[[], float] = time.monotonic,
        progress: Optional[ProgressCallback] = None,
    ):
        self.config = config
        self.executor = executor or get_executor(config.kill_grace)
        self.which = which
        self.disk_usage = disk_usage
        self.http_get = http_get
        self.clock = clock
        self.progress = progress

    def check_preconditions(self) -> None:
        """
        Raises:
            MissingToolError: If a required utility is missing
            InsufficientDiskSpaceError: If the collection filesystem is too full
        """
        check_required_tools(self.config.required_utils, self.which)
        check_disk_space(self.config.disk_check_path, self.config.min_free_kb, self.disk_usage)

    def prepare_tree(self, registry: ProbeRegistry, context: RunContext) -> CategoryTree:
        """Build a fresh category tree; anything under the working root from an earlier run is removed."""
        tree = CategoryTree(context.working_root, list(self.config.categories) + list(registry.categories()))
        tree.reset()
        tree.create()
        return tree

    def run(self, mode: CollectionMode, registry: ProbeRegistry, context: RunContext) -> RunReport:
        """
        Check preconditions, build the category tree and run every probe of ``mode``.

        Args:
            mode: Collection mode selecting the probes
            registry: Registry holding the probes
            context: Detected run context

        Returns:
            RunReport: One result per probe, in registration order

        Raises:
            FatalPreconditionError: Before any probe runs or anything is written
        """
        self.check_preconditions()
        self.prepare_tree(registry, context)

        probes = registry.for_mode(mode)
        logger.info(f"Running {len(probes)} probes in {mode.value} mode")

        report = RunReport()
        for probe in probes:
            self._notify("start", probe, None)
            result = self.run_probe(probe, context)
            report.add(result)
            self._notify("finish", probe, result)

        logger.info(f"Probe results: {report.counts()}")
        return report

    def run_probe(self, probe: Probe, context: RunContext) -> ProbeResult:
        """Run a single probe and map how it ended onto a ProbeResult."""
        started = self.clock()

        def finish(status: ProbeStatus, message: str = "") -> ProbeResult:
            return ProbeResult(probe.name, status, message, elapsed=self.clock() - started)

        try:
            if not probe.is_available(context):
                logger.warning(f"Skipping {probe.name}: {probe.skip_message}")
                return finish(ProbeStatus.SKIPPED, probe.skip_message)
            action = probe.resolve(context)
        except VariantNotSupportedError as e:
            logger.warning(f"Skipping {probe.name}: {e}")
            return finish(ProbeStatus.SKIPPED, str(e))
        except Exception as e:
            return self._failed(probe, e, finish)

        session = ProbeSession(probe, context, self.config, self.executor, http_get=self.http_get, clock=self.clock)
        try:
            action(session)
        except ProbeTimeoutError as e:
            logger.warning(f"{probe.name} timed out: {e}")
            return finish(ProbeStatus.TIMED_OUT, str(e))
        except Exception as e:
            return self._failed(probe, e, finish)

        if session.timeouts:
            return finish(ProbeStatus.TIMED_OUT, "; ".join(session.timeouts))
        if session.failures:
            return finish(ProbeStatus.PARTIAL, "; ".join(session.failures))
        return finish(ProbeStatus.SUCCESS)

    @staticmethod
    def _failed(probe: Probe, error: Exception, finish: Callable[..., ProbeResult]) -> ProbeResult:
        logger.error(f"{probe.name} failed: {type(error).__name__}: {error}")
        logger.debug(f"{probe.name} failure details", exc_info=True)
        return finish(ProbeStatus.FAILED, f"{type(error).__name__}: {error}")

    def _notify(self, event: str, probe: Probe, result: Optional[ProbeResult]) -> None:
        if self.progress is not None:
            self.progress(event, probe, result)
