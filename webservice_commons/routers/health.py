"""Health endpoint.

- GET /health: service status and the mounted web services
"""

from __future__ import annotations

from typing import Mapping

from fastapi import APIRouter

from webservice_commons.models.envelope import KEY_RESPONSE
from webservice_commons.response_builder import ResponseBuilder
from webservice_commons.services.web_service import WebService


def create_health_router(
    *,
    services: Mapping[str, WebService] | None = None,
    response_key: str = KEY_RESPONSE,
) -> APIRouter:
    """Factory that creates the health router with injected dependencies."""

    health_router = APIRouter(tags=["health"])

    @health_router.get("/health")
    async def health() -> dict:
        """Service health check listing the methods each service implements."""
        mounted = [
            {"name": name, "methods": [method.value for method in service.methods]}
            for name, service in (services or {}).items()
        ]
        return ResponseBuilder.success(
            {"status": "healthy", "services": mounted},
            total_rows=1,
            response_key=response_key,
        ).build()

    return health_router
