# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Probe framework.

A Probe is a named, immutable description of one unit of collection work:
the category it writes into, a capability predicate, an action (or a table
of environment-specific variants) and its time bounds. Probes never talk to
the outside world directly; their actions receive a ProbeSession that
bounds every external call by the probe's deadline, writes artifacts into
the probe's category directory and records sub-step failures.
"""

import logging
import shutil
import time
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import requests

from ..utils.core.context import CollectionMode, InitKind, PackageManagerKind, RunContext
from ..utils.core.errors import ProbeTimeoutError, VariantNotSupportedError
from ..utils.core.process import ProcessExecutor, ProcessResult
from ..utils.infrastructure.network import fetch_text

logger = logging.getLogger(__name__)

ProbeAction = Callable[["ProbeSession"], None]
Capability = Callable[[RunContext], bool]

# Marker for "use the probe's command_timeout"
_PROBE_DEFAULT = object()


def always(context: RunContext) -> bool:
    return True


def select_init_kind(context: RunContext) -> InitKind:
    return context.init_kind


def select_package_manager(context: RunContext) -> PackageManagerKind:
    return context.package_manager_kind


@dataclass(frozen=True, eq=False)
class Probe:
    """
    Immutable description of a collection step.

    Attributes:
        name: Unique probe name
        category: Category directory the probe writes into
        description: Progress text, read as "Trying to <description>..."
        action: Callable receiving a ProbeSession; mutually exclusive with variants
        variants: Environment-specific actions keyed by the value returned by selector
        selector: Maps the RunContext to a variants key
        unsupported_message: Skip message used when no variant matches
        capability: Predicate deciding whether the probe can run at all
        skip_message: Skip message used when the capability predicate is false
        timeout: Wall-clock budget for the whole probe in seconds, None for unbounded
        command_timeout: Bound on each external call in seconds, None for unbounded
    """

    name: str
    category: str
    description: str = ""
    action: Optional[ProbeAction] = None
    variants: Mapping[Any, ProbeAction] = field(default_factory=dict)
    selector: Optional[Callable[[RunContext], Any]] = None
    unsupported_message: str = "The current operating system is not supported."
    capability: Capability = always
    skip_message: str = "Prerequisite not available."
    timeout: Optional[float] = None
    command_timeout: Optional[float] = None

    def __post_init__(self):
        if (self.action is None) == (not self.variants):
            raise ValueError(f"Probe '{self.name}' needs exactly one of action or variants")
        if self.variants and self.selector is None:
            raise ValueError(f"Probe '{self.name}' defines variants without a selector")

    def resolve(self, context: RunContext) -> ProbeAction:
        """
        Pick the action to run for ``context``.

        Raises:
            VariantNotSupportedError: If no variant matches the detected environment
        """
        if self.action is not None:
            return self.action
        key = self.selector(context)
        try:
            return self.variants[key]
        except KeyError:
            raise VariantNotSupportedError(self.unsupported_message)

    def is_available(self, context: RunContext) -> bool:
        return bool(self.capability(context))

    def with_overrides(self, overrides: Mapping[str, Any]) -> "Probe":
        """Copy of the probe with configured timeout overrides applied."""
        changes = {key: overrides[key] for key in ("timeout", "command_timeout") if key in overrides}
        if not changes:
            return self
        return replace(self, **changes)


class ProbeSession:
    """
    Execution handle passed to a probe action.

    The session owns the probe's deadline. Every external call made through
    it is bounded by ``min(command timeout, remaining probe budget)`` and the
    deadline is checked before each step, so a probe that runs out of time
    stops with ProbeTimeoutError and its running command is killed.
    Sub-steps that fail without aborting the probe are recorded so the
    orchestrator can report the probe as partial.
    """

    def __init__(
        self,
        probe: Probe,
        context: RunContext,
        config,
        executor: ProcessExecutor,
        http_get: Callable[..., str] = fetch_text,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.probe = probe
        self.context = context
        self.config = config
        self.executor = executor
        self.http_get = http_get
        self.clock = clock
        self.started = clock()
        self.deadline = None if probe.timeout is None else self.started + probe.timeout
        self.failures: List[str] = []
        self.timeouts: List[str] = []
        self.artifacts: List[Path] = []

    @property
    def directory(self) -> Path:
        return self.context.working_root / self.probe.category

    def path(self, name: str) -> Path:
        return self.directory / name

    @property
    def elapsed(self) -> float:
        return self.clock() - self.started

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return self.deadline - self.clock()

    def check_deadline(self) -> None:
        """
        Raises:
            ProbeTimeoutError: If the probe budget is exhausted
        """
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise ProbeTimeoutError(f"Probe exceeded its {self.probe.timeout:g}s budget")

    def record_failure(self, message: str) -> None:
        logger.warning(f"{self.probe.name}: {message}")
        self.failures.append(message)

    def warn(self, message: str) -> None:
        logger.warning(f"{self.probe.name}: {message}")

    def _bound(self, timeout: Any) -> Optional[float]:
        if timeout is _PROBE_DEFAULT:
            timeout = self.probe.command_timeout
        limits = [limit for limit in (timeout, self.remaining()) if limit is not None]
        return max(min(limits), 0.0) if limits else None

    def run(
        self,
        command: Union[str, Sequence[str]],
        output: Optional[str] = None,
        append: bool = False,
        merge_stderr: bool = False,
        timeout: Any = _PROBE_DEFAULT,
        check: bool = True,
    ) -> ProcessResult:
        """
        Run an external command inside the probe's budget.

        Args:
            command: Command to execute
            output: File name in the category directory receiving stdout; captured when None
            append: Append to ``output`` instead of truncating it
            merge_stderr: Also send stderr into ``output``
            timeout: Per-command bound, defaults to the probe's command_timeout
            check: Record a non-zero exit status as a sub-step failure

        Returns:
            ProcessResult: Result of the command

        Raises:
            ProbeTimeoutError: If the probe deadline passed before or during the command
        """
        self.check_deadline()
        bound = self._bound(timeout)

        if output is None:
            result = self.executor.run(command, timeout=bound, merge_stderr=merge_stderr)
        else:
            target = self.path(output)
            with open(target, "ab" if append else "wb") as handle:
                result = self.executor.run(command, timeout=bound, output=handle, merge_stderr=merge_stderr)
            self._track(target)

        if result.timed_out:
            self.check_deadline()
            self.warn(result.describe_failure())
            self.timeouts.append(result.describe_failure())
        elif check and result.failed:
            self.record_failure(result.describe_failure())
        return result

    def write_text(self, name: str, content: str, append: bool = False) -> Path:
        """Write ``content`` into a file of the category directory."""
        self.check_deadline()
        target = self.path(name)
        with open(target, "a" if append else "w", encoding="utf-8") as handle:
            handle.write(content)
        self._track(target)
        return target

    def copy(self, source: Union[str, Path], name: Optional[str] = None) -> bool:
        """
        Copy a file or directory tree into the category directory, following symlinks.

        Args:
            source: File or directory to copy
            name: Destination name, defaults to the source's base name

        Returns:
            bool: False when the source does not exist or could not be copied
        """
        self.check_deadline()
        source = Path(source)
        if not source.exists():
            logger.debug(f"{self.probe.name}: {source} not present")
            return False

        target = self.path(name or source.name)
        try:
            if source.is_dir():
                shutil.copytree(source, target, symlinks=False, dirs_exist_ok=True)
            else:
                shutil.copy2(source, target)
        except (OSError, shutil.Error) as e:
            self.record_failure(f"Unable to copy {source}: {e}")
            return False
        self._track(target)
        return True

    def copy_contents(self, source_dir: Union[str, Path]) -> int:
        """Copy every entry of ``source_dir`` into the category directory; returns the count copied."""
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            logger.debug(f"{self.probe.name}: {source_dir} not present")
            return 0
        return sum(1 for entry in sorted(source_dir.iterdir()) if self.copy(entry))

    def fetch(self, url: str, output: str, append: bool = False, timeout: Optional[float] = None) -> bool:
        """
        Save the body of an HTTP resource into a category file.

        Returns:
            bool: True when the resource was fetched
        """
        self.check_deadline()
        bound = self._bound(timeout if timeout is not None else _PROBE_DEFAULT)
        try:
            body = self.http_get(url, timeout=bound)
        except requests.exceptions.RequestException as e:
            self.record_failure(f"Unable to fetch {url}: {e}")
            return False
        self.write_text(output, body, append=append)
        return True

    def _track(self, path: Path) -> None:
        if path not in self.artifacts:
            self.artifacts.append(path)


class ProbeRegistry:
    """
    Ordered collection of probes, grouped by the modes they run in.
    """

    def __init__(self):
        self._probes: Dict[str, Probe] = {}
        self._modes: Dict[str, Tuple[CollectionMode, ...]] = {}

    def register(self, probe: Probe, modes: Iterable[CollectionMode] = (CollectionMode.COLLECT,)) -> Probe:
        """
        Add a probe at the end of the registration order.

        Raises:
            ValueError: If a probe with the same name is already registered
        """
        if probe.name in self._probes:
            raise ValueError(f"Probe already registered: {probe.name}")
        self._probes[probe.name] = probe
        self._modes[probe.name] = tuple(modes)
        logger.debug(f"Registered probe {probe.name} ({probe.category})")
        return probe

    def for_mode(self, mode: CollectionMode) -> Tuple[Probe, ...]:
        """Probes that run in ``mode``, in registration order."""
        return tuple(probe for name, probe in self._probes.items() if mode in self._modes[name])

    def get(self, name: str) -> Optional[Probe]:
        return self._probes.get(name)

    def categories(self) -> Tuple[str, ...]:
        """Distinct categories referenced by registered probes, in first-use order."""
        return tuple(dict.fromkeys(probe.category for probe in self._probes.values()))

    def __len__(self) -> int:
        return len(self._probes)

    def __contains__(self, name: str) -> bool:
        return name in self._probes
