"""Lock-protected registry of in-flight deployment runs."""

from __future__ import annotations

import threading

from .interfaces import RunningProcessPort


class RunHandle:
    """Registry-owned reference to one deployment's external process.

    A handle is registered as a placeholder before the process exists so the
    identity is reserved while spawning; the process is bound once started.
    """

    def __init__(self, identity: str):
        self.identity = identity
        self._process: RunningProcessPort | None = None

    @property
    def process(self) -> RunningProcessPort | None:
        return self._process

    def handle_bind_process(self, process: RunningProcessPort) -> None:
        """Attach the spawned process to this handle.

        Args:
            process: Spawned process handle.

        Returns:
            None: Mutates handle state.

        Raises:
            RuntimeError: Raised when a process is already bound.
        """

        if self._process is not None:
            raise RuntimeError(f"process already bound for {self.identity}")
        self._process = process

    def __repr__(self) -> str:
        pid = self._process.pid if self._process is not None else None
        return f"RunHandle(identity={self.identity!r}, pid={pid})"


class RunRegistry:
    """Single source of truth for which deployment identities are running.

    All operations hold one exclusive lock for the duration of the map access
    only; the lock is never held across process execution or network I/O.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._running: dict[str, RunHandle] = {}

    def registry_is_running(self, identity: str) -> bool:
        with self._lock:
            return identity in self._running

    def registry_list_running(self) -> frozenset[str]:
        """Return a snapshot of running identities.

        Returns:
            frozenset[str]: Identities registered at call time.
        """

        with self._lock:
            return frozenset(self._running)

    def registry_try_register(self, identity: str, handle: RunHandle) -> bool:
        """Register a handle unless the identity is already present.

        Args:
            identity: Deployment identity.
            handle: Handle to own the registry slot.

        Returns:
            bool: True when registered, False on conflict.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        with self._lock:
            if identity in self._running:
                return False
            self._running[identity] = handle
            return True

    def registry_unregister(self, identity: str) -> None:
        """Remove an identity; missing identities are ignored."""

        with self._lock:
            self._running.pop(identity, None)
