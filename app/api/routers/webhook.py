"""Webhook router receiving progress events from the provisioning process."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.domain import LifecycleEvent, domain_normalize_deployment_name
from app.jobs import DeploymentCoordinatorPort


class InboundEventPayload(BaseModel):
    """Event body posted by provisioning scripts.

    Attributes:
        type: Event kind, relayed without validation.
        name: Deployment identity.
        message: Human-readable message.
        timestamp: Optional RFC 3339 timestamp; filled in when blank.
        data: Optional structured payload.
    """

    type: str = ""
    name: str = ""
    message: str = ""
    timestamp: str = ""
    data: Any = None


def api_create_webhook_router(coordinator: DeploymentCoordinatorPort) -> APIRouter:
    """Create router exposing the inbound event webhook.

    Args:
        coordinator: Deployment coordinator relaying events.

    Returns:
        APIRouter: Router exposing `/webhook/event`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if coordinator is None:
        raise ValueError("coordinator must not be None")

    router = APIRouter(prefix="/webhook", tags=["webhook"])

    @router.post("/event")
    def api_webhook_event(payload: InboundEventPayload) -> JSONResponse:
        """Forward one inbound event to the frontend sink.

        Args:
            payload: Event body.

        Returns:
            JSONResponse: Forwarding acknowledgement.

        Raises:
            RuntimeError: Raised when execution fails unexpectedly.
        """

        event = LifecycleEvent(
            kind=payload.type,
            name=domain_normalize_deployment_name(payload.name),
            message=payload.message,
            timestamp=payload.timestamp,
            data=payload.data,
        )
        coordinator.handle_inbound_event(event)
        return JSONResponse(content={"status": "forwarded"}, status_code=status.HTTP_200_OK)

    return router
