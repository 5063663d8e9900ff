"""Typed interfaces for job-layer orchestration responsibilities."""

from typing import Mapping, Protocol, Sequence

from app.domain import LaunchRequest, LifecycleEvent, ProcessOutcome


class RunningProcessPort(Protocol):
    """Port definition for one spawned external process."""

    @property
    def pid(self) -> int | None:
        """Return the operating-system process id, when available."""

    def process_wait(self) -> ProcessOutcome:
        """Block until the process exits and return its combined output.

        Returns:
            ProcessOutcome: Exit code and combined stdout/stderr text.

        Raises:
            OSError: Raised when output cannot be collected.
        """

    def process_kill(self) -> None:
        """Terminate the process forcibly and reap it.

        Raises:
            OSError: Raised when the signal cannot be delivered.
        """


class ProcessRunnerPort(Protocol):
    """Port definition for starting external commands."""

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


class NameResolverPort(Protocol):
    """Port definition for deriving a free deployment identity."""

    def job_resolve_name(self, requested_name: str) -> str:
        """Return a deployment identity not yet backed by persisted state.

        Args:
            requested_name: Requested identity.

        Returns:
            str: Resolved identity.

        Raises:
            OSError: Raised when state markers cannot be inspected.
        """


class DeploymentCoordinatorPort(Protocol):
    """Port definition consumed by the HTTP transport layer."""

    def resolve_and_check(self, name: str | None) -> tuple[str, bool]:
        """Resolve an identity and report whether it is already running."""

    def launch_async(self, request: LaunchRequest) -> object:
        """Start one launch in the background and return immediately.

        Raises:
            DeploymentAlreadyRunningError: Raised when the identity is already running.
        """

    def approve(self, name: str | None) -> None:
        """Run device approval synchronously.

        Raises:
            ApprovalFailedError: Raised when approval does not succeed.
        """

    def list_running(self) -> frozenset[str]:
        """Return a snapshot of running deployment identities."""

    def handle_inbound_event(self, event: LifecycleEvent) -> None:
        """Relay one event received from the provisioning process."""
