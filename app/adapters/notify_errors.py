"""Project-native typed exceptions for notification delivery failures."""

from __future__ import annotations


class NotificationDeliveryError(Exception):
    """Base exception for one failed event delivery attempt.

    Delivery errors classify failures inside the relay and are converted into
    a `DeliveryResult`; they are never raised to relay callers.

    Attributes:
        status_code: Optional HTTP status returned by the sink.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class NotificationSerializationError(NotificationDeliveryError, ValueError):
    """Event payload could not be serialized to JSON."""


class NotificationTransportError(NotificationDeliveryError, ConnectionError):
    """Sink could not be reached or the request timed out."""


class NotificationRejectedError(NotificationDeliveryError):
    """Sink answered with a non-success HTTP status."""
