"""Synchronous device approval for provisioned deployments."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Callable, Mapping

from app.adapters import NotificationRelayPort
from app.domain import LifecycleEventKind, domain_normalize_deployment_name

from .errors import ApprovalFailedError, ProcessExitError, ProcessSpawnError, ProcessTimeoutError
from .interfaces import ProcessRunnerPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApprovalTriggerConfig:
    """Configuration values for approval command assembly.

    Attributes:
        pipeline_dir: Working directory of the provisioning Makefile.
        make_executable: Executable running the approval target.
        approve_target: Make target approving pending devices.
        timeout_seconds: Upper bound for one approval command.
    """

    pipeline_dir: str
    make_executable: str = "make"
    approve_target: str = "ec2-approve"
    timeout_seconds: float = 300.0


class ApprovalTrigger:
    """Run the approval command for one identity and relay its outcome.

    Runs on the caller's thread. It does not consult the run registry and
    imposes no concurrency restriction.
    """

    def __init__(
        self,
        relay: NotificationRelayPort,
        process_runner: ProcessRunnerPort,
        config: ApprovalTriggerConfig,
        base_environment_provider: Callable[[], Mapping[str, str]] | None = None,
    ):
        """Initialize approval trigger dependencies.

        Args:
            relay: Lifecycle event relay.
            process_runner: Runner executing the approval command.
            config: Command assembly configuration.
            base_environment_provider: Optional provider of the inherited child environment.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if relay is None:
            raise ValueError("relay must not be None")
        if process_runner is None:
            raise ValueError("process_runner must not be None")
        if not config.pipeline_dir.strip():
            raise ValueError("config.pipeline_dir must not be blank")
        if config.timeout_seconds <= 0:
            raise ValueError("config.timeout_seconds must be > 0")

        self._relay = relay
        self._process_runner = process_runner
        self._config = config
        self._base_environment_provider = base_environment_provider or (lambda: os.environ)

    def job_build_command(self, identity: str) -> list[str]:
        return [self._config.make_executable, self._config.approve_target, f"NAME={identity}"]

    def job_approve(self, name: str | None) -> None:
        """Approve pending devices for one deployment.

        Args:
            name: Deployment identity; blank selects the default.

        Returns:
            None: Success is reported through an `approve_success` event.

        Raises:
            ApprovalFailedError: Raised when the command cannot start, times out
                or exits non-zero. Its `output` carries the captured output.
        """

        identity = domain_normalize_deployment_name(name)
        self._relay.relay_send(
            identity,
            LifecycleEventKind.APPROVE_TRIGGERED,
            f"triggering device approval for {identity}",
        )

        try:
            outcome = self._process_runner.process_run(
                argv=self.job_build_command(identity),
                cwd=self._config.pipeline_dir,
                env=dict(self._base_environment_provider()),
                timeout_seconds=self._config.timeout_seconds,
            )
            logger.info("[approve/%s] %s", identity, outcome.output)
            if not outcome.succeeded:
                raise ProcessExitError(
                    f"exit status {outcome.return_code}",
                    return_code=outcome.return_code,
                    output=outcome.output,
                    identity=identity,
                )
        except (ProcessSpawnError, ProcessTimeoutError, ProcessExitError) as error:
            failure_output = getattr(error, "output", "") or str(error)
            logger.error("[approve/%s] %s", identity, error)
            self._relay.relay_send(
                identity,
                LifecycleEventKind.APPROVE_FAILED,
                f"approval failed: {failure_output}",
            )
            raise ApprovalFailedError(
                f"approve failed: {error}",
                output=failure_output,
                identity=identity,
            ) from error

        self._relay.relay_send(
            identity,
            LifecycleEventKind.APPROVE_SUCCESS,
            f"device approved for {identity}",
            {"output": outcome.output},
        )
