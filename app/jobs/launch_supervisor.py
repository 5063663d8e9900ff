"""Launch supervisor running the provisioning pipeline for one deployment at a time."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import os
import threading
from typing import Callable, Mapping

from app.adapters import NotificationRelayPort
from app.domain import (
    LaunchRequest,
    LifecycleEventKind,
    ProcessOutcome,
    domain_launch_request_public_payload,
    domain_normalize_deployment_name,
    domain_sanitize_output,
)

from .errors import DeploymentAlreadyRunningError, ProcessSpawnError
from .interfaces import ProcessRunnerPort
from .run_registry import RunHandle, RunRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchSupervisorConfig:
    """Configuration values for provisioning command assembly.

    Attributes:
        pipeline_dir: Working directory of the provisioning Makefile.
        make_executable: Executable running the provisioning target.
        provision_target: Make target running the full pipeline.
        credential_env_name: Child environment variable for the credential token.
        auxiliary_env_name: Child environment variable for the auxiliary token.
    """

    pipeline_dir: str
    make_executable: str = "make"
    provision_target: str = "ec2-full-setup"
    credential_env_name: str = "CLAUDE_CODE_OAUTH_TOKEN"
    auxiliary_env_name: str = "OPENCLAW_GATEWAY_TOKEN"


@dataclass(frozen=True)
class LaunchTask:
    """Handle on the background unit of work of one admitted launch.

    Callers on the HTTP path ignore it; the outcome is observable only through
    relayed lifecycle events.

    Attributes:
        identity: Deployment identity being provisioned.
        thread: Worker thread supervising the run.
    """

    identity: str
    thread: threading.Thread

    def task_wait(self, timeout: float | None = None) -> bool:
        """Wait for the run to finish and report whether it did."""

        self.thread.join(timeout)
        return not self.thread.is_alive()

    def task_is_alive(self) -> bool:
        return self.thread.is_alive()


def job_describe_exit(outcome: ProcessOutcome) -> str:
    """Return a short reason for a non-zero process exit."""

    if outcome.return_code < 0:
        return f"terminated by signal {-outcome.return_code}"
    return f"exit status {outcome.return_code}"


class LaunchSupervisor:
    """Admit, spawn and supervise provisioning runs.

    Admission reserves the identity in the run registry with a placeholder
    handle, so check and registration are one critical section. Everything
    after admission runs on a dedicated thread and ends with exactly one
    terminal event and unconditional deregistration.
    """

    def __init__(
        self,
        registry: RunRegistry,
        relay: NotificationRelayPort,
        process_runner: ProcessRunnerPort,
        config: LaunchSupervisorConfig,
        base_environment_provider: Callable[[], Mapping[str, str]] | None = None,
    ):
        """Initialize launch supervisor dependencies.

        Args:
            registry: Shared run registry.
            relay: Lifecycle event relay.
            process_runner: Runner starting the provisioning command.
            config: Command assembly configuration.
            base_environment_provider: Optional provider of the inherited child environment.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if registry is None:
            raise ValueError("registry must not be None")
        if relay is None:
            raise ValueError("relay must not be None")
        if process_runner is None:
            raise ValueError("process_runner must not be None")
        if not config.pipeline_dir.strip():
            raise ValueError("config.pipeline_dir must not be blank")
        if not config.provision_target.strip():
            raise ValueError("config.provision_target must not be blank")

        self._registry = registry
        self._relay = relay
        self._process_runner = process_runner
        self._config = config
        self._base_environment_provider = base_environment_provider or (lambda: os.environ)

    def job_launch_async(self, request: LaunchRequest) -> LaunchTask:
        """Admit one launch and supervise it on a background thread.

        Args:
            request: Launch request; its name should already be resolved.

        Returns:
            LaunchTask: Handle on the started background unit of work.

        Raises:
            DeploymentAlreadyRunningError: Raised when the identity is already running.
        """

        identity = domain_normalize_deployment_name(request.name)
        admitted_request = replace(request, name=identity)
        handle = RunHandle(identity)

        if not self._registry.registry_try_register(identity, handle):
            message = f"deployment already running for {identity}"
            logger.warning("[launch/%s] %s", identity, message)
            self._relay.relay_send(identity, LifecycleEventKind.FAILED, message)
            raise DeploymentAlreadyRunningError(message, identity=identity)

        worker = threading.Thread(
            target=self._job_supervise_run,
            args=(admitted_request, handle),
            name=f"launch-{identity}",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError:
            self._registry.registry_unregister(identity)
            raise
        return LaunchTask(identity=identity, thread=worker)

    def job_build_command(self, request: LaunchRequest) -> list[str]:
        """Assemble provisioning argv; secrets never appear here.

        Args:
            request: Admitted launch request.

        Returns:
            list[str]: Command and arguments.
        """

        return [
            self._config.make_executable,
            self._config.provision_target,
            f"NAME={request.name}",
            f"CLOUDFLARE={'true' if request.cloudflare else 'false'}",
        ]

    def job_build_environment(self, request: LaunchRequest) -> dict[str, str]:
        """Assemble the child environment carrying the request secrets.

        Args:
            request: Admitted launch request.

        Returns:
            dict[str, str]: Inherited environment plus credential variables.
        """

        environment = dict(self._base_environment_provider())
        environment[self._config.credential_env_name] = request.credential_token
        if request.auxiliary_token:
            environment[self._config.auxiliary_env_name] = request.auxiliary_token
        else:
            environment.pop(self._config.auxiliary_env_name, None)
        return environment

    def _job_supervise_run(self, request: LaunchRequest, handle: RunHandle) -> None:
        """Run one admitted launch from `launching` to a terminal event.

        Args:
            request: Admitted launch request.
            handle: Placeholder handle registered for the identity.

        Returns:
            None: Outcome is reported through relayed events.

        Raises:
            RuntimeError: Unexpected failures are logged, not raised.
        """

        identity = request.name
        terminal_emitted = False
        process_exited = False
        try:
            self._relay.relay_send(
                identity,
                LifecycleEventKind.LAUNCHING,
                f"starting {self._config.provision_target} for {identity}",
                domain_launch_request_public_payload(request),
            )

            try:
                process = self._process_runner.process_spawn(
                    argv=self.job_build_command(request),
                    cwd=self._config.pipeline_dir,
                    env=self.job_build_environment(request),
                )
            except ProcessSpawnError as error:
                logger.error("[launch/%s] failed to start: %s", identity, error)
                self._registry.registry_unregister(identity)
                terminal_emitted = True
                self._job_emit_failed(identity, reason=str(error), output="")
                return

            handle.handle_bind_process(process)
            outcome = process.process_wait()
            process_exited = True
            self._registry.registry_unregister(identity)
            output = domain_sanitize_output(outcome.output)

            if not outcome.succeeded:
                reason = job_describe_exit(outcome)
                logger.error("[launch/%s] failed: %s\n%s", identity, reason, output)
                terminal_emitted = True
                self._job_emit_failed(identity, reason=reason, output=output)
                return

            logger.info("[launch/%s] completed successfully\n%s", identity, output)
            terminal_emitted = True
            self._relay.relay_send(
                identity,
                LifecycleEventKind.COMPLETED,
                f"deployment complete for {identity}",
                {"name": identity},
            )
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.exception("[launch/%s] supervision aborted", identity)
            if not process_exited:
                self._job_kill_orphan(identity, handle)
            self._registry.registry_unregister(identity)
            if not terminal_emitted:
                self._job_emit_failed_safely(identity, reason=f"{type(error).__name__}: {error}")
        finally:
            self._registry.registry_unregister(identity)

    def _job_emit_failed(self, identity: str, reason: str, output: str) -> None:
        self._relay.relay_send(
            identity,
            LifecycleEventKind.FAILED,
            f"{self._config.provision_target} failed: {reason}",
            {"name": identity, "error": output},
        )

    def _job_kill_orphan(self, identity: str, handle: RunHandle) -> None:
        """Kill a bound process whose exit was never observed.

        Args:
            identity: Deployment identity.
            handle: Registry handle of the aborted run.

        Returns:
            None: Failures are logged with the orphaned pid.
        """

        process = handle.process
        if process is None:
            return
        try:
            process.process_kill()
        except OSError as error:
            logger.error("[launch/%s] could not kill orphaned pid=%s: %s", identity, process.pid, error)
            return
        logger.warning("[launch/%s] killed pid=%s after aborted supervision", identity, process.pid)

    def _job_emit_failed_safely(self, identity: str, reason: str) -> None:
        try:
            self._job_emit_failed(identity, reason=reason, output="")
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("[launch/%s] could not emit failed event", identity)
