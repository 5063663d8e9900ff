"""Smoke tests for the subprocess-backed process runner."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

from app.jobs import ProcessSpawnError, ProcessTimeoutError, SubprocessProcessRunner


def test_jobs_process_spawn_combines_output_and_reports_exit(tmp_path: Path) -> None:
    """Merge stdout and stderr and report the exit code.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate spawned process handling.

    Raises:
        AssertionError: Raised when output or exit code are wrong.
    """

    script = "import os, sys; print(os.getcwd()); print(os.environ['DEPLOY_SECRET']); sys.stderr.write('warn\\n'); sys.exit(3)"
    process = SubprocessProcessRunner().process_spawn(
        argv=[sys.executable, "-c", script],
        cwd=str(tmp_path),
        env={"DEPLOY_SECRET": "hidden-value", "SYSTEMROOT": "C:\\Windows"},
    )
    outcome = process.process_wait()

    assert process.pid is not None
    assert outcome.return_code == 3
    assert outcome.succeeded is False
    assert str(tmp_path.resolve()) in outcome.output or str(tmp_path) in outcome.output
    assert "hidden-value" in outcome.output
    assert "warn" in outcome.output


def test_jobs_process_run_success(tmp_path: Path) -> None:
    """Run a short command to completion."""

    outcome = SubprocessProcessRunner().process_run(
        argv=[sys.executable, "-c", "print('approved')"],
        cwd=str(tmp_path),
        env={},
        timeout_seconds=30,
    )

    assert outcome.succeeded is True
    assert outcome.output.strip() == "approved"


def test_jobs_process_spawn_missing_executable_raises(tmp_path: Path) -> None:
    """Raise ProcessSpawnError when the executable does not exist."""

    with pytest.raises(ProcessSpawnError):
        SubprocessProcessRunner().process_spawn(
            argv=[str(tmp_path / "missing-binary")],
            cwd=str(tmp_path),
            env={},
        )


def test_jobs_process_run_timeout_raises(tmp_path: Path) -> None:
    """Raise ProcessTimeoutError when the command outlives its timeout.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate timeout handling.

    Raises:
        AssertionError: Raised when the timeout is not enforced.
    """

    with pytest.raises(ProcessTimeoutError, match="timed out"):
        SubprocessProcessRunner().process_run(
            argv=[sys.executable, "-c", "import time; time.sleep(10)"],
            cwd=str(tmp_path),
            env={},
            timeout_seconds=0.5,
        )


def test_jobs_process_kill_terminates_running_child(tmp_path: Path) -> None:
    """Kill and reap a child that would otherwise keep running."""

    process = SubprocessProcessRunner().process_spawn(
        argv=[sys.executable, "-c", "import time; time.sleep(30)"],
        cwd=str(tmp_path),
        env={"SYSTEMROOT": "C:\\Windows"},
    )

    process.process_kill()
    outcome = process.process_wait()

    assert outcome.succeeded is False
