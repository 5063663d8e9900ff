"""API router package for endpoint composition."""

from .deployments import api_create_deployment_router
from .health import api_create_health_router
from .webhook import api_create_webhook_router

__all__ = ["api_create_deployment_router", "api_create_health_router", "api_create_webhook_router"]
