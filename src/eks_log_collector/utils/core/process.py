# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Bounded subprocess execution utilities.

Every external command the collector runs goes through this module. It
provides:
- A uniform ProcessResult for finished, failed, missing and timed-out commands
- Wall-clock timeouts that terminate the whole process group of the command
  (SIGTERM, then SIGKILL after a grace period) and reap it
- Tracking of in-flight processes so a signal handler can stop them

Commands run with LANG/LC_ALL set to C so that sorting and output formats
are consistent between hosts.
"""

import logging
import os
import shlex
import signal
import subprocess  # nosec B404 # For process execution API
import threading
import time
from typing import BinaryIO, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# Exit status used by shells when a command cannot be found
COMMAND_NOT_FOUND = 127


class ProcessResult:
    """
    Container for subprocess execution results with metadata.
    """

    def __init__(
        self,
        returncode: int,
        stdout: str = "",
        stderr: str = "",
        command: List[str] = None,
        execution_time: float = 0.0,
        pid: Optional[int] = None,
        timed_out: bool = False,
        not_found: bool = False,
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.command = command or []
        self.execution_time = execution_time
        self.pid = pid
        self.timed_out = timed_out
        self.not_found = not_found

    @property
    def success(self) -> bool:
        """Check if the command executed successfully."""
        return self.returncode == 0 and not self.timed_out

    @property
    def failed(self) -> bool:
        """Check if the command failed."""
        return not self.success

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def describe_failure(self) -> str:
        """One-line description of why the command did not succeed."""
        if self.timed_out:
            return f"'{self.command_line}' timed out after {self.execution_time:.0f}s"
        if self.not_found:
            return f"'{self.command[0]}' not found"
        detail = self.stderr.strip().splitlines()[0] if self.stderr.strip() else ""
        message = f"'{self.command_line}' exited with {self.returncode}"
        return f"{message}: {detail}" if detail else message

    def __str__(self) -> str:
        status = "SUCCESS" if self.success else "FAILED"
        return f"ProcessResult(status={status}, returncode={self.returncode}, time={self.execution_time:.2f}s)"


class ProcessExecutor:
    """
    Subprocess executor that guarantees timed-out commands are killed.

    Each command is started in its own session, so on timeout the signal is
    delivered to the whole process group (including children spawned by the
    command) and the direct child is reaped before returning.
    """

    def __init__(self, kill_grace: float = 5.0):
        """
        Initialize the process executor.

        Args:
            kill_grace: Seconds to wait after SIGTERM before sending SIGKILL
        """
        self.kill_grace = kill_grace
        self._active_processes: Dict[int, subprocess.Popen] = {}
        self._process_lock = threading.Lock()

    def run(
        self,
        command: Union[str, List[str]],
        timeout: Optional[float] = None,
        output: Optional[BinaryIO] = None,
        merge_stderr: bool = False,
        env: Optional[Dict[str, str]] = None,
    ) -> ProcessResult:
        """
        Execute a command, optionally streaming its output into a file.

        Args:
            command: Command to execute (string or list)
            timeout: Maximum execution time in seconds, None for no limit
            output: Binary file object receiving stdout; when None stdout is captured
            merge_stderr: Send stderr to the same destination as stdout
            env: Additional environment variables

        Returns:
            ProcessResult: Execution results with metadata. Missing executables and
            timeouts are reported through the result, never raised.
        """
        cmd_list = self._prepare_command(command)
        start_time = time.monotonic()

        logger.debug(f"Executing command: {' '.join(cmd_list)} (timeout={timeout})")

        stdout_target = output if output is not None else subprocess.PIPE
        stderr_target = subprocess.STDOUT if merge_stderr else subprocess.PIPE

        try:
            process = subprocess.Popen(
                cmd_list,
                stdin=subprocess.DEVNULL,
                stdout=stdout_target,
                stderr=stderr_target,
                env=self._prepare_environment(env),
                start_new_session=True,
            )
        except FileNotFoundError:
            logger.debug(f"Command not found: {cmd_list[0]}")
            return ProcessResult(
                returncode=COMMAND_NOT_FOUND,
                stderr=f"Command not found: {cmd_list[0]}",
                command=cmd_list,
                not_found=True,
            )
        except PermissionError as e:
            return ProcessResult(returncode=126, stderr=str(e), command=cmd_list)

        with self._process_lock:
            self._active_processes[process.pid] = process

        try:
            try:
                stdout, stderr = process.communicate(timeout=timeout)
            except subprocess.TimeoutExpired:
                execution_time = time.monotonic() - start_time
                logger.warning(f"Command timed out after {execution_time:.2f}s: {' '.join(cmd_list)}")
                self._terminate(process)
                return ProcessResult(
                    returncode=-1,
                    stderr=f"Command timed out after {timeout}s",
                    command=cmd_list,
                    execution_time=execution_time,
                    pid=process.pid,
                    timed_out=True,
                )
        finally:
            with self._process_lock:
                self._active_processes.pop(process.pid, None)

        execution_time = time.monotonic() - start_time
        result = ProcessResult(
            returncode=process.returncode,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            command=cmd_list,
            execution_time=execution_time,
            pid=process.pid,
        )
        if result.failed:
            logger.debug(f"Command failed with exit code {result.returncode}: {' '.join(cmd_list)}")
        return result

    def _prepare_command(self, command: Union[str, List[str]]) -> List[str]:
        """Prepare and validate command format."""
        if isinstance(command, str):
            cmd_list = shlex.split(command)
        elif isinstance(command, (list, tuple)):
            cmd_list = [str(arg) for arg in command]
        else:
            raise TypeError(f"Invalid command type: {type(command)}")
        if not cmd_list:
            raise ValueError("Empty command not allowed")
        return cmd_list

    def _prepare_environment(self, env: Optional[Dict[str, str]]) -> Dict[str, str]:
        """Copy the current environment with a fixed C locale and optional overrides."""
        safe_env = os.environ.copy()
        safe_env["LANG"] = "C"
        safe_env["LC_ALL"] = "C"
        if env:
            safe_env.update(env)
        return safe_env

    def _terminate(self, process: subprocess.Popen) -> None:
        """Stop the process group of ``process`` and reap the child."""
        logger.debug(f"Sending SIGTERM to process group {process.pid}")
        _signal_group(process, signal.SIGTERM)
        try:
            process.communicate(timeout=self.kill_grace)
            logger.debug(f"Process {process.pid} terminated gracefully")
        except subprocess.TimeoutExpired:
            logger.warning(
                f"Process {process.pid} didn't respond to SIGTERM after {self.kill_grace}s, sending SIGKILL"
            )
            _signal_group(process, signal.SIGKILL)
            process.communicate()
            logger.debug(f"Process {process.pid} killed forcefully")

    def terminate_all_processes(self) -> None:
        """Terminate every command that is still running."""
        with self._process_lock:
            processes = list(self._active_processes.values())
            self._active_processes.clear()
        for process in processes:
            if process.poll() is None:
                self._terminate(process)

    def get_active_processes(self) -> List[int]:
        """Get list of active process PIDs."""
        with self._process_lock:
            return list(self._active_processes.keys())


def _signal_group(process: subprocess.Popen, sig: int) -> None:
    try:
        os.killpg(process.pid, sig)
    except ProcessLookupError:
        pass


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


# Global executor instance
_global_executor = None


def get_executor(kill_grace: Optional[float] = None) -> ProcessExecutor:
    """
    Get the global process executor instance.

    Args:
        kill_grace: SIGTERM grace period (only used for first call)

    Returns:
        ProcessExecutor: Global executor instance
    """
    global _global_executor
    if _global_executor is None:
        _global_executor = ProcessExecutor() if kill_grace is None else ProcessExecutor(kill_grace)
    return _global_executor


def cleanup_processes() -> None:
    """Clean up all active processes."""
    if _global_executor:
        _global_executor.terminate_all_processes()
