"""HTTP notification relay delivering lifecycle events to the frontend webhook."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Callable, Final

import httpx

from app.domain import (
    DeliveryResult,
    LifecycleEvent,
    domain_build_lifecycle_event,
    domain_ensure_event_timestamp,
    domain_serialize_lifecycle_event,
)

from .interfaces import NotificationRelayPort
from .notify_errors import (
    NotificationDeliveryError,
    NotificationRejectedError,
    NotificationSerializationError,
    NotificationTransportError,
)

logger = logging.getLogger(__name__)


class HttpNotificationRelay(NotificationRelayPort):
    """Best-effort relay posting JSON events to `<frontend_url><sink_path>`.

    Every delivery is a single POST bounded by the configured timeout. Failures
    are logged and reported through `DeliveryResult`, never raised and never
    retried.
    """

    _CONTENT_TYPE: Final[str] = "application/json"

    def __init__(
        self,
        frontend_url: str,
        sink_path: str = "/api/webhook/pipeline",
        timeout_seconds: float = 5.0,
        http_client: httpx.Client | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize notification relay.

        Args:
            frontend_url: Base URL of the frontend receiving events.
            sink_path: Path of the webhook endpoint on the frontend.
            timeout_seconds: Upper bound for one delivery attempt.
            http_client: Optional preconfigured client, mainly for tests.
            clock: Optional provider of timezone-aware current time.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_frontend_url = frontend_url.strip().rstrip("/")
        normalized_sink_path = sink_path.strip()

        if not normalized_frontend_url:
            raise ValueError("frontend_url must not be blank")
        if not normalized_sink_path.startswith("/"):
            raise ValueError("sink_path must start with '/'")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        self._sink_url = f"{normalized_frontend_url}{normalized_sink_path}"
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client or httpx.Client(timeout=timeout_seconds)
        self._clock = clock

    @property
    def sink_url(self) -> str:
        return self._sink_url

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
            RuntimeError: This implementation does not raise runtime errors.
        """

        event = domain_build_lifecycle_event(kind=kind, name=name, message=message, data=data, clock=self._clock)
        return self.relay_forward(event)

    def relay_forward(self, event: LifecycleEvent) -> DeliveryResult:
        """Forward an existing event, filling in a missing timestamp.

        Args:
            event: Event built locally or received from the provisioning process.

        Returns:
            DeliveryResult: Inspectable delivery outcome.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        stamped_event = domain_ensure_event_timestamp(event, clock=self._clock)
        try:
            status_code = self._relay_deliver(stamped_event)
        except NotificationDeliveryError as error:
            logger.warning("[webhook] -> %s failed (frontend may be offline): %s", self._sink_url, error)
            return DeliveryResult(delivered=False, status_code=error.status_code, error=str(error))

        logger.info("[webhook] -> frontend %d", status_code)
        return DeliveryResult(delivered=True, status_code=status_code)

    def relay_close(self) -> None:
        """Release pooled HTTP connections."""

        self._http_client.close()

    def _relay_deliver(self, event: LifecycleEvent) -> int:
        """Serialize and POST one event, classifying every failure.

        Args:
            event: Timestamped event.

        Returns:
            int: Success HTTP status code.

        Raises:
            NotificationSerializationError: Raised when the payload is not JSON-serializable.
            NotificationTransportError: Raised on connection failure or timeout.
            NotificationRejectedError: Raised when the sink answers with non-2xx status.
        """

        try:
            body = domain_serialize_lifecycle_event(event)
        except (TypeError, ValueError) as error:
            raise NotificationSerializationError(f"marshal error: {error}") from error

        logger.info(
            "[webhook] %s/%s: %s | payload: %s",
            event.name,
            event.kind,
            event.message,
            body.decode("utf-8"),
        )

        try:
            response = self._http_client.post(
                self._sink_url,
                content=body,
                headers={"Content-Type": self._CONTENT_TYPE},
                timeout=self._timeout_seconds,
            )
        except httpx.HTTPError as error:
            raise NotificationTransportError(f"{type(error).__name__}: {error}") from error

        if not response.is_success:
            raise NotificationRejectedError(
                f"sink rejected event with status {response.status_code}",
                status_code=response.status_code,
            )
        return response.status_code
