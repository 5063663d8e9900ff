"""Deployment API router composition for launch and approval triggers."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from app.domain import DEFAULT_DEPLOYMENT_NAME, LaunchRequest, domain_normalize_deployment_name
from app.jobs import ApprovalFailedError, DeploymentAlreadyRunningError, DeploymentCoordinatorPort

logger = logging.getLogger(__name__)


class LaunchPayload(BaseModel):
    """Inbound launch request body.

    Attributes:
        name: Requested deployment identity.
        token: Optional gateway token for the deployed application.
        claude_code_oauth_token: Required credential token.
        cloudflare: Whether to provision the tunnel add-on.
    """

    name: str = ""
    token: str = ""
    claude_code_oauth_token: str = ""
    cloudflare: bool = False


def api_create_deployment_router(coordinator: DeploymentCoordinatorPort) -> APIRouter:
    """Create router exposing deployment launch and approval triggers.

    Args:
        coordinator: Deployment coordinator executing triggers.

    Returns:
        APIRouter: Router exposing `/launch` and `/approve`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if coordinator is None:
        raise ValueError("coordinator must not be None")

    router = APIRouter(tags=["deployments"])

    @router.post("/launch")
    def api_launch_trigger(payload: LaunchPayload) -> JSONResponse:
        """Accept one provisioning launch and return before it runs.

        Args:
            payload: Launch request body.

        Returns:
            JSONResponse: 202 with the resolved name, 400 when the credential is
            missing, or 409 when the resolved name is already running.

        Raises:
            OSError: Raised when state markers cannot be inspected.
        """

        if not payload.claude_code_oauth_token.strip():
            return JSONResponse(
                content={"error": "claude_code_oauth_token is required"},
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        identity, already_running = coordinator.resolve_and_check(payload.name)
        if already_running:
            return JSONResponse(
                content={"error": f"deployment already running for {identity}"},
                status_code=status.HTTP_409_CONFLICT,
            )

        launch_request = LaunchRequest(
            name=identity,
            credential_token=payload.claude_code_oauth_token.strip(),
            auxiliary_token=payload.token.strip(),
            cloudflare=payload.cloudflare,
        )
        try:
            coordinator.launch_async(launch_request)
        except DeploymentAlreadyRunningError as error:
            return JSONResponse(content={"error": str(error)}, status_code=status.HTTP_409_CONFLICT)

        payload_out = {
            "status": "accepted",
            "name": identity,
            "message": "ec2-full-setup started. Progress will be sent via webhook.",
        }
        return JSONResponse(content=payload_out, status_code=status.HTTP_202_ACCEPTED)

    @router.post("/approve")
    async def api_approve_trigger(request: Request) -> JSONResponse:
        """Run device approval and wait for its outcome.

        A missing or unreadable body approves the default deployment.

        Args:
            request: Raw HTTP request carrying an optional `{"name": ...}` body.

        Returns:
            JSONResponse: 200 on success or 500 with the failure reason.

        Raises:
            RuntimeError: Raised when execution fails unexpectedly.
        """

        identity = _api_extract_approve_name(await request.body())
        try:
            await run_in_threadpool(coordinator.approve, identity)
        except ApprovalFailedError as error:
            return JSONResponse(content={"error": str(error)}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        payload_out = {
            "status": "ok",
            "name": identity,
            "message": "device approved",
        }
        return JSONResponse(content=payload_out, status_code=status.HTTP_200_OK)

    return router


def _api_extract_approve_name(raw_body: bytes) -> str:
    """Extract the deployment name from an approve body, defaulting on any problem."""

    try:
        decoded_body = json.loads(raw_body) if raw_body else {}
    except ValueError:
        logger.debug("unreadable approve body, using %s", DEFAULT_DEPLOYMENT_NAME)
        return DEFAULT_DEPLOYMENT_NAME
    if not isinstance(decoded_body, dict):
        return DEFAULT_DEPLOYMENT_NAME
    name = decoded_body.get("name")
    return domain_normalize_deployment_name(name if isinstance(name, str) else None)
