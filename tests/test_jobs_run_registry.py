"""Regression tests for run registry mutual exclusion."""

from __future__ import annotations

import threading

import pytest

from app.domain import ProcessOutcome
from app.jobs import RunHandle, RunRegistry


class _ProcessStub:
    """Minimal spawned-process stub."""

    pid = 4242

    def process_wait(self) -> ProcessOutcome:
        return ProcessOutcome(return_code=0, output="")


def test_jobs_registry_register_and_unregister() -> None:
    """Track membership through register and idempotent unregister.

    Returns:
        None: Assertions validate membership transitions.

    Raises:
        AssertionError: Raised when membership is inconsistent.
    """

    registry = RunRegistry()

    assert registry.registry_try_register("alpha", RunHandle("alpha")) is True
    assert registry.registry_is_running("alpha") is True
    assert registry.registry_list_running() == frozenset({"alpha"})

    registry.registry_unregister("alpha")
    assert registry.registry_try_register("alpha", RunHandle("alpha")) is True

    registry.registry_unregister("alpha")
    registry.registry_unregister("alpha")

    assert registry.registry_is_running("alpha") is False
    assert registry.registry_list_running() == frozenset()


def test_jobs_registry_rejects_duplicate_identity() -> None:
    """Reject a second registration while the identity is running.

    Returns:
        None: Assertions validate conflict behavior.

    Raises:
        AssertionError: Raised when a duplicate registration is admitted.
    """

    registry = RunRegistry()
    first_handle = RunHandle("alpha")

    assert registry.registry_try_register("alpha", first_handle) is True
    assert registry.registry_try_register("alpha", RunHandle("alpha")) is False
    assert registry.registry_list_running() == frozenset({"alpha"})

    registry.registry_unregister("alpha")
    assert registry.registry_try_register("alpha", RunHandle("alpha")) is True


def test_jobs_registry_concurrent_registration_has_single_winner() -> None:
    """Admit exactly one of many concurrent registrations for one identity.

    Returns:
        None: Assertions validate mutual exclusion.

    Raises:
        AssertionError: Raised when more than one registration succeeds.
    """

    registry = RunRegistry()
    contender_count = 16
    barrier = threading.Barrier(contender_count)
    results: list[bool] = []
    results_lock = threading.Lock()

    def _contend() -> None:
        barrier.wait()
        registered = registry.registry_try_register("shared", RunHandle("shared"))
        with results_lock:
            results.append(registered)

    threads = [threading.Thread(target=_contend) for _ in range(contender_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert results.count(True) == 1
    assert results.count(False) == contender_count - 1


def test_jobs_registry_snapshot_is_detached() -> None:
    """Return snapshots unaffected by later changes."""

    registry = RunRegistry()
    registry.registry_try_register("alpha", RunHandle("alpha"))
    snapshot = registry.registry_list_running()
    registry.registry_try_register("beta", RunHandle("beta"))

    assert snapshot == frozenset({"alpha"})


def test_jobs_run_handle_binds_process_once() -> None:
    """Bind the spawned process to a placeholder handle exactly once.

    Returns:
        None: Assertions validate handle binding.

    Raises:
        AssertionError: Raised when rebinding is allowed.
    """

    handle = RunHandle("alpha")
    assert handle.process is None

    process = _ProcessStub()
    handle.handle_bind_process(process)

    assert handle.process is process
    assert "4242" in repr(handle)
    with pytest.raises(RuntimeError, match="already bound"):
        handle.handle_bind_process(_ProcessStub())
