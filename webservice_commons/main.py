"""FastAPI application entry point.

Mounts each ``WebService`` under ``{path_prefix}/{name}`` and renders every
error as a response envelope.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Mapping

from fastapi import FastAPI

from webservice_commons.config.settings import CommonsSettings
from webservice_commons.logging_config import configure_logging
from webservice_commons.middleware.error_handler import register_error_handlers
from webservice_commons.middleware.request_id import RequestIdMiddleware
from webservice_commons.routers.health import create_health_router
from webservice_commons.routers.web_service import create_web_service_router
from webservice_commons.services.web_service import WebService

logger = logging.getLogger(__name__)


def create_app(
    services: Mapping[str, WebService] | None = None,
    settings: CommonsSettings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    services:
        Web services keyed by the name they are mounted under.
    settings:
        Explicit settings; loaded from the environment when omitted.
    """
    settings = settings or CommonsSettings()
    services = dict(services or {})

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: logging setup and startup/shutdown messages."""
        configure_logging(settings.log_level, json_format=settings.json_logs)
        logger.info(
            "Starting web services %s under %s on port %d",
            sorted(services),
            settings.path_prefix,
            settings.port,
        )
        yield
        logger.info("Web services shut down")

    app = FastAPI(
        title="Web Service Commons",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_error_handlers(app, response_key=settings.response_key)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(
        create_health_router(services=services, response_key=settings.response_key)
    )
    for name, service in services.items():
        app.include_router(
            create_web_service_router(name, service, settings)
        )

    return app


app = create_app()
