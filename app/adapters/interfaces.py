"""Typed interfaces for adapter-layer responsibilities."""

from typing import Any
from typing import Protocol

from app.domain import DeliveryResult, LifecycleEvent


class NotificationRelayPort(Protocol):
    """Port definition for relaying lifecycle events to the external observer."""

    def relay_send(self, name: str, kind: str, message: str, data: Any = None) -> DeliveryResult:
        """Build one timestamped event and forward it to the sink.

        Args:
            name: Deployment identity.
            kind: Event kind.
            message: Human-readable message.
            data: Optional structured payload.

        Returns:
            DeliveryResult: Inspectable delivery outcome.

        Raises:
            RuntimeError: Implementations must not raise on delivery failure.
        """

    def relay_forward(self, event: LifecycleEvent) -> DeliveryResult:
        """Forward an existing event, filling in a missing timestamp.

        Args:
            event: Event built locally or received from the provisioning process.

        Returns:
            DeliveryResult: Inspectable delivery outcome.

        Raises:
            RuntimeError: Implementations must not raise on delivery failure.
        """
