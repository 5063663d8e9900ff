"""Regression tests for best-effort notification relay delivery."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging

import httpx
import pytest

from app.adapters import HttpNotificationRelay
from app.domain import LifecycleEvent, LifecycleEventKind


def _fixed_clock() -> datetime:
    return datetime(2026, 5, 4, 10, 0, 0, tzinfo=timezone.utc)


def _build_relay(handler, **kwargs) -> HttpNotificationRelay:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpNotificationRelay(
        frontend_url="http://frontend.test/",
        http_client=client,
        clock=_fixed_clock,
        **kwargs,
    )


def test_adapters_relay_send_posts_timestamped_event() -> None:
    """POST one JSON event to the configured sink path.

    Returns:
        None: Assertions validate request shape and delivery result.

    Raises:
        AssertionError: Raised when request or result are incorrect.
    """

    captured_requests: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured_requests.append(request)
        return httpx.Response(200, json={"ok": True})

    relay = _build_relay(_handler)
    result = relay.relay_send("alpha", LifecycleEventKind.COMPLETED, "deployment complete for alpha", {"name": "alpha"})

    assert result.delivered is True
    assert result.status_code == 200
    assert result.error is None
    assert len(captured_requests) == 1
    request = captured_requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://frontend.test/api/webhook/pipeline"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "type": "completed",
        "name": "alpha",
        "message": "deployment complete for alpha",
        "timestamp": "2026-05-04T10:00:00Z",
        "data": {"name": "alpha"},
    }


def test_adapters_relay_forward_keeps_external_timestamp() -> None:
    """Forward relayed events verbatim, including their timestamp and unknown kind.

    Returns:
        None: Assertions validate forwarding behavior.

    Raises:
        AssertionError: Raised when forwarded event is altered.
    """

    bodies: list[dict[str, object]] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(204)

    relay = _build_relay(_handler)
    relay.relay_forward(LifecycleEvent(kind="custom_stage", name="alpha", message="m", timestamp="2020-01-01T00:00:00Z"))
    relay.relay_forward(LifecycleEvent(kind="creating_ec2", name="alpha", message="m"))

    assert bodies[0]["type"] == "custom_stage"
    assert bodies[0]["timestamp"] == "2020-01-01T00:00:00Z"
    assert bodies[1]["timestamp"] == "2026-05-04T10:00:00Z"


def test_adapters_relay_reports_rejected_status_without_raising(caplog: pytest.LogCaptureFixture) -> None:
    """Report non-success sink statuses as undelivered.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate swallowed rejection.

    Raises:
        AssertionError: Raised when rejection raises or is reported delivered.
    """

    call_count = 0

    def _handler(_request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        return httpx.Response(503)

    relay = _build_relay(_handler)
    with caplog.at_level(logging.WARNING, logger="app.adapters.notification_relay"):
        result = relay.relay_send("alpha", LifecycleEventKind.FAILED, "boom")

    assert result.delivered is False
    assert result.status_code == 503
    assert "503" in (result.error or "")
    assert call_count == 1
    assert "frontend may be offline" in caplog.text


def test_adapters_relay_reports_transport_error_without_raising() -> None:
    """Report connection failures as undelivered without retrying.

    Returns:
        None: Assertions validate swallowed transport errors.

    Raises:
        AssertionError: Raised when transport errors propagate or are retried.
    """

    call_count = 0

    def _handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        raise httpx.ConnectError("connection refused", request=request)

    relay = _build_relay(_handler)
    result = relay.relay_send("alpha", LifecycleEventKind.LAUNCHING, "starting")

    assert result.delivered is False
    assert result.status_code is None
    assert "connection refused" in (result.error or "")
    assert call_count == 1


def test_adapters_relay_reports_timeout_without_raising() -> None:
    """Report sink timeouts as undelivered."""

    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = _build_relay(_handler).relay_send("alpha", LifecycleEventKind.LAUNCHING, "starting")

    assert result.delivered is False
    assert "ReadTimeout" in (result.error or "")


def test_adapters_relay_reports_serialization_error_without_sending() -> None:
    """Skip delivery when the payload cannot be serialized.

    Returns:
        None: Assertions validate marshal error handling.

    Raises:
        AssertionError: Raised when an unserializable payload is sent or raises.
    """

    call_count = 0

    def _handler(_request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        return httpx.Response(200)

    result = _build_relay(_handler).relay_send("alpha", LifecycleEventKind.COMPLETED, "done", {"handle": object()})

    assert result.delivered is False
    assert "marshal error" in (result.error or "")
    assert call_count == 0


def test_adapters_relay_custom_sink_path() -> None:
    """Join frontend URL and custom sink path without duplicate slashes."""

    relay = HttpNotificationRelay(frontend_url="http://frontend.test/", sink_path="/hooks/events")

    assert relay.sink_url == "http://frontend.test/hooks/events"
    relay.relay_close()


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"frontend_url": " "}, "frontend_url"),
        ({"frontend_url": "http://x", "sink_path": "hooks"}, "sink_path"),
        ({"frontend_url": "http://x", "timeout_seconds": 0}, "timeout_seconds"),
    ],
)
def test_adapters_relay_rejects_invalid_config(kwargs: dict[str, object], message: str) -> None:
    """Reject blank URLs, relative sink paths and non-positive timeouts."""

    with pytest.raises(ValueError, match=message):
        HttpNotificationRelay(**kwargs)
