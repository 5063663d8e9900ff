"""Deployment coordinator facade consumed by the HTTP transport layer."""

from __future__ import annotations

from dataclasses import replace
import logging
import threading

from app.adapters import NotificationRelayPort
from app.domain import LaunchRequest, LifecycleEvent, LifecycleEventKind, domain_normalize_deployment_name

from .approval_trigger import ApprovalTrigger
from .errors import ApprovalFailedError
from .interfaces import DeploymentCoordinatorPort, NameResolverPort
from .launch_supervisor import LaunchSupervisor, LaunchTask
from .run_registry import RunRegistry

logger = logging.getLogger(__name__)


class DeploymentCoordinator(DeploymentCoordinatorPort):
    """Compose name resolution, run tracking, launches, approvals and relaying."""

    def __init__(
        self,
        name_resolver: NameResolverPort,
        registry: RunRegistry,
        launch_supervisor: LaunchSupervisor,
        approval_trigger: ApprovalTrigger,
        relay: NotificationRelayPort,
    ):
        """Initialize coordinator dependencies.

        Args:
            name_resolver: Resolver for free deployment identities.
            registry: Shared run registry.
            launch_supervisor: Supervisor for provisioning runs.
            approval_trigger: Device approval trigger.
            relay: Lifecycle event relay.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if name_resolver is None:
            raise ValueError("name_resolver must not be None")
        if registry is None:
            raise ValueError("registry must not be None")
        if launch_supervisor is None:
            raise ValueError("launch_supervisor must not be None")
        if approval_trigger is None:
            raise ValueError("approval_trigger must not be None")
        if relay is None:
            raise ValueError("relay must not be None")

        self._name_resolver = name_resolver
        self._registry = registry
        self._launch_supervisor = launch_supervisor
        self._approval_trigger = approval_trigger
        self._relay = relay

    def resolve_and_check(self, name: str | None) -> tuple[str, bool]:
        """Resolve a free identity and report whether it is already running.

        Args:
            name: Requested identity; blank selects the default.

        Returns:
            tuple[str, bool]: Resolved identity and its running state.

        Raises:
            OSError: Raised when state markers cannot be inspected.
        """

        identity = self._name_resolver.job_resolve_name(domain_normalize_deployment_name(name))
        return identity, self._registry.registry_is_running(identity)

    def launch_async(self, request: LaunchRequest) -> LaunchTask:
        """Start one launch in the background and return immediately.

        Args:
            request: Launch request with an already resolved name.

        Returns:
            LaunchTask: Handle on the background run; HTTP callers discard it.

        Raises:
            DeploymentAlreadyRunningError: Raised when the identity is already running.
        """

        normalized_request = replace(request, name=domain_normalize_deployment_name(request.name))
        return self._launch_supervisor.job_launch_async(normalized_request)

    def approve(self, name: str | None) -> None:
        """Run device approval synchronously.

        Args:
            name: Deployment identity; blank selects the default.

        Returns:
            None: Returns when approval succeeded.

        Raises:
            ApprovalFailedError: Raised when approval does not succeed.
        """

        self._approval_trigger.job_approve(name)

    def list_running(self) -> frozenset[str]:
        return self._registry.registry_list_running()

    def handle_inbound_event(self, event: LifecycleEvent) -> threading.Thread | None:
        """Relay one event received from the provisioning process.

        A `cloudflare_ready` event has its tunnel URL logged prominently. A
        `pairing_required` event starts device approval on a background thread.

        Args:
            event: Event as received; kind is not validated.

        Returns:
            threading.Thread | None: Approval thread when one was started.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        identity = domain_normalize_deployment_name(event.name)
        if identity != event.name:
            event = replace(event, name=identity)

        logger.info("[event/%s] %s: %s", identity, getattr(event.kind, "value", event.kind), event.message)
        if event.kind == LifecycleEventKind.CLOUDFLARE_READY:
            logger.info("========================================")
            logger.info("  CLOUDFLARE URL [%s]: %s", identity, event.message)
            logger.info("========================================")

        self._relay.relay_forward(event)

        if event.kind != LifecycleEventKind.PAIRING_REQUIRED:
            return None

        approval_thread = threading.Thread(
            target=self._coordinator_approve_in_background,
            args=(identity,),
            name=f"approve-{identity}",
            daemon=True,
        )
        approval_thread.start()
        return approval_thread

    def _coordinator_approve_in_background(self, identity: str) -> None:
        try:
            self._approval_trigger.job_approve(identity)
        except ApprovalFailedError as error:
            logger.warning("[approve/%s] automatic approval failed: %s", identity, error)
