"""Subprocess-backed runner for provisioning and approval commands."""

from __future__ import annotations

import logging
import subprocess
from typing import Mapping, Sequence

from app.domain import ProcessOutcome

from .errors import ProcessSpawnError, ProcessTimeoutError
from .interfaces import ProcessRunnerPort, RunningProcessPort

logger = logging.getLogger(__name__)


class SubprocessRunningProcess(RunningProcessPort):
    """Spawned child process with stdout and stderr merged into one pipe."""

    def __init__(self, popen: subprocess.Popen):
        self._popen = popen

    @property
    def pid(self) -> int | None:
        return self._popen.pid

    def process_wait(self) -> ProcessOutcome:
        """Block until the process exits and return its combined output.

        Returns:
            ProcessOutcome: Exit code and combined stdout/stderr text.

        Raises:
            OSError: Raised when output cannot be collected.
        """

        output, _ = self._popen.communicate()
        return ProcessOutcome(return_code=self._popen.returncode, output=output or "")

    def process_kill(self) -> None:
        if self._popen.poll() is None:
            self._popen.kill()
        self._popen.wait()


class SubprocessProcessRunner(ProcessRunnerPort):
    """Process runner built on `subprocess` with combined output capture."""

    def process_spawn(
        self,
        argv: Sequence[str],
        cwd: str,
        env: Mapping[str, str],
    ) -> RunningProcessPort:
        """Start one command without waiting for it.

        Args:
            argv: Command and arguments.
            cwd: Working directory.
            env: Complete child environment.

        Returns:
            RunningProcessPort: Handle on the spawned process.

        Raises:
            ProcessSpawnError: Raised when the command cannot be started.
        """

        if not argv:
            raise ValueError("argv must not be empty")

        try:
            popen = subprocess.Popen(
                list(argv),
                cwd=cwd,
                env=dict(env),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as error:
            raise ProcessSpawnError(f"{argv[0]}: {error}") from error

        logger.debug("spawned %s (pid=%s) in %s", argv[0], popen.pid, cwd)
        return SubprocessRunningProcess(popen)

    def process_run(
        self,
        argv: Sequence[str],
        cwd: str,
        env: Mapping[str, str],
        timeout_seconds: float,
    ) -> ProcessOutcome:
        """Run one command to completion with a bounded wait.

        Args:
            argv: Command and arguments.
            cwd: Working directory.
            env: Complete child environment.
            timeout_seconds: Upper bound for the command duration.

        Returns:
            ProcessOutcome: Exit code and combined stdout/stderr text.

        Raises:
            ProcessSpawnError: Raised when the command cannot be started.
            ProcessTimeoutError: Raised when the command exceeds the timeout.
        """

        if not argv:
            raise ValueError("argv must not be empty")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        try:
            completed = subprocess.run(
                list(argv),
                cwd=cwd,
                env=dict(env),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            partial_output = error.output or ""
            if isinstance(partial_output, bytes):
                partial_output = partial_output.decode("utf-8", errors="replace")
            raise ProcessTimeoutError(
                f"{argv[0]} timed out after {timeout_seconds:g}s",
                output=partial_output,
            ) from error
        except OSError as error:
            raise ProcessSpawnError(f"{argv[0]}: {error}") from error

        return ProcessOutcome(return_code=completed.returncode, output=completed.stdout or "")
