"""Tests for lifecycle event construction and wire serialization."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json

import pytest

from app.domain import (
    LaunchRequest,
    LifecycleEvent,
    LifecycleEventKind,
    domain_build_lifecycle_event,
    domain_ensure_event_timestamp,
    domain_launch_request_public_payload,
    domain_normalize_deployment_name,
    domain_serialize_lifecycle_event,
    domain_utc_timestamp,
)


def _fixed_clock() -> datetime:
    return datetime(2026, 3, 1, 14, 30, 5, 123456, tzinfo=timezone(timedelta(hours=2)))


def test_domain_utc_timestamp_converts_to_utc_seconds() -> None:
    """Render RFC 3339 UTC timestamps with seconds precision.

    Returns:
        None: Assertions validate timestamp format.

    Raises:
        AssertionError: Raised when timestamp format is incorrect.
    """

    assert domain_utc_timestamp(_fixed_clock) == "2026-03-01T12:30:05Z"


def test_domain_build_event_uses_enum_value_as_kind() -> None:
    """Store the plain string value of enum kinds.

    Returns:
        None: Assertions validate event fields.

    Raises:
        AssertionError: Raised when kind or timestamp are wrong.
    """

    event = domain_build_lifecycle_event(
        kind=LifecycleEventKind.LAUNCHING,
        name="alpha",
        message="starting",
        clock=_fixed_clock,
    )

    assert event.kind == "launching"
    assert type(event.kind) is str
    assert event.timestamp == "2026-03-01T12:30:05Z"
    assert event.data is None


def test_domain_ensure_timestamp_keeps_existing_value() -> None:
    """Keep timestamps already supplied by an external source.

    Returns:
        None: Assertions validate timestamp handling.

    Raises:
        AssertionError: Raised when timestamps are overwritten or missing.
    """

    stamped = LifecycleEvent(kind="creating_ec2", name="alpha", timestamp="2020-01-01T00:00:00Z")
    unstamped = LifecycleEvent(kind="creating_ec2", name="alpha")

    assert domain_ensure_event_timestamp(stamped, clock=_fixed_clock) is stamped
    assert domain_ensure_event_timestamp(unstamped, clock=_fixed_clock).timestamp == "2026-03-01T12:30:05Z"


def test_domain_serialize_omits_missing_data() -> None:
    """Serialize the wire shape and omit absent data.

    Returns:
        None: Assertions validate JSON body.

    Raises:
        AssertionError: Raised when JSON shape is wrong.
    """

    without_data = json.loads(domain_serialize_lifecycle_event(LifecycleEvent(kind="failed", name="a", message="m")))
    with_data = json.loads(
        domain_serialize_lifecycle_event(LifecycleEvent(kind="completed", name="a", data={"name": "a"}))
    )

    assert without_data == {"type": "failed", "name": "a", "message": "m", "timestamp": ""}
    assert with_data["data"] == {"name": "a"}


def test_domain_serialize_rejects_unserializable_payload() -> None:
    """Raise TypeError for payloads JSON cannot encode."""

    with pytest.raises(TypeError):
        domain_serialize_lifecycle_event(LifecycleEvent(kind="failed", name="a", data={"handle": object()}))


def test_domain_launch_request_hides_secrets() -> None:
    """Keep token values out of repr and the public payload.

    Returns:
        None: Assertions validate secret handling.

    Raises:
        AssertionError: Raised when a token leaks.
    """

    request = LaunchRequest(name="alpha", credential_token="cred-secret", auxiliary_token="aux-secret", cloudflare=True)
    public_payload = domain_launch_request_public_payload(request)

    assert "cred-secret" not in repr(request)
    assert "aux-secret" not in repr(request)
    assert "secret" not in json.dumps(public_payload)
    assert public_payload == {"name": "alpha", "cloudflare": True, "auxiliary_token_provided": True}


@pytest.mark.parametrize(("raw_name", "expected"), [(None, "main"), ("", "main"), ("  ", "main"), (" dev ", "dev")])
def test_domain_normalize_deployment_name(raw_name: str | None, expected: str) -> None:
    """Default blank names to `main` and strip whitespace."""

    assert domain_normalize_deployment_name(raw_name) == expected
