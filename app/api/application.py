"""FastAPI application factory for the provisioning pipeline server.

This module defines API application composition used by the runtime.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator, Callable, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import AppSettings
from app.jobs import DeploymentCoordinatorPort

from .routers import api_create_deployment_router, api_create_health_router, api_create_webhook_router

logger = logging.getLogger(__name__)


def create_api_application(
    settings: AppSettings,
    coordinator: DeploymentCoordinatorPort,
    shutdown_hooks: Sequence[Callable[[], None]] = (),
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        coordinator: Deployment coordinator behind every trigger endpoint.
        shutdown_hooks: Callables releasing runtime resources when the server stops.

    Returns:
        FastAPI: Framework application instance with all routers mounted.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    @asynccontextmanager
    async def api_lifespan(_application: FastAPI) -> AsyncIterator[None]:
        yield
        for hook in shutdown_hooks:
            try:
                hook()
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("shutdown hook %r failed", hook)

    application = FastAPI(title="Provisioning Pipeline Server", lifespan=api_lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @application.exception_handler(RequestValidationError)
    async def api_invalid_body_handler(_request: Request, error: RequestValidationError) -> JSONResponse:
        """Map body validation failures to a 400 error payload."""

        return JSONResponse(
            content={"error": f"invalid JSON: {error.errors()}"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service descriptor for bootstrap verification."""

        return {
            "service": "provisioning-pipeline-server",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(coordinator=coordinator))
    application.include_router(api_create_deployment_router(coordinator=coordinator))
    application.include_router(api_create_webhook_router(coordinator=coordinator))

    return application
