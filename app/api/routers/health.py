"""Health endpoint router composition for liveness and run status checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.jobs import DeploymentCoordinatorPort


def api_create_health_router(coordinator: DeploymentCoordinatorPort) -> APIRouter:
    """Create router exposing liveness and running-deployment status.

    Args:
        coordinator: Deployment coordinator used for run status.

    Returns:
        APIRouter: Router exposing `/health` and `/status` endpoints.

    Raises:
        ValueError: Raised when coordinator is invalid.
    """

    if coordinator is None:
        raise ValueError("coordinator must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return process liveness."""

        return JSONResponse(content={"status": "ok"}, status_code=status.HTTP_200_OK)

    @router.get("/status")
    def api_running_status() -> JSONResponse:
        """Return identities of deployments currently running.

        Returns:
            JSONResponse: Sorted running identities and their count.

        Raises:
            RuntimeError: Raised if the registry snapshot fails.
        """

        running_names = sorted(coordinator.list_running())
        payload = {
            "running_deployments": running_names,
            "count": len(running_names),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
