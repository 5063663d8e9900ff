"""Lifecycle event construction and serialization helpers."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
import json
from typing import Callable

from .models import LifecycleEvent

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def domain_utc_timestamp(clock: Callable[[], datetime] | None = None) -> str:
    """Return the current UTC time as an RFC 3339 string with seconds precision.

    Args:
        clock: Optional provider of timezone-aware current time.

    Returns:
        str: Timestamp such as `2026-01-31T12:00:00Z`.
    """

    current_time = clock() if clock is not None else datetime.now(timezone.utc)
    return current_time.astimezone(timezone.utc).strftime(_TIMESTAMP_FORMAT)


def domain_build_lifecycle_event(
    kind: str,
    name: str,
    message: str,
    data: object | None = None,
    clock: Callable[[], datetime] | None = None,
) -> LifecycleEvent:
    """Build one lifecycle event stamped with the current UTC time.

    Args:
        kind: Event kind.
        name: Deployment identity.
        message: Human-readable message.
        data: Optional structured payload.
        clock: Optional provider of timezone-aware current time.

    Returns:
        LifecycleEvent: Immutable timestamped event.
    """

    return LifecycleEvent(
        kind=str(getattr(kind, "value", kind)),
        name=name,
        message=message,
        timestamp=domain_utc_timestamp(clock),
        data=data,
    )


def domain_ensure_event_timestamp(
    event: LifecycleEvent,
    clock: Callable[[], datetime] | None = None,
) -> LifecycleEvent:
    """Return the event unchanged when stamped, else a stamped copy."""

    if event.timestamp:
        return event
    return replace(event, timestamp=domain_utc_timestamp(clock))


def domain_serialize_lifecycle_event(event: LifecycleEvent) -> bytes:
    """Serialize one lifecycle event to its JSON wire representation.

    Args:
        event: Event to serialize.

    Returns:
        bytes: UTF-8 JSON body; `data` is omitted when absent.

    Raises:
        TypeError: Raised when the payload is not JSON-serializable.
        ValueError: Raised when the payload contains circular references.
    """

    body: dict[str, object] = {
        "type": event.kind,
        "name": event.name,
        "message": event.message,
        "timestamp": event.timestamp,
    }
    if event.data is not None:
        body["data"] = event.data
    return json.dumps(body, ensure_ascii=False).encode("utf-8")
