"""Pydantic Settings for the web-service commons.

All environment variables use the WEBSERVICE_ prefix.
Example: WEBSERVICE_PORT=8080, WEBSERVICE_RESPONSE_KEY=response
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class CommonsSettings(BaseSettings):
    """Web-service configuration validated from environment variables."""

    # Service
    port: int = Field(default=8080, ge=1, le=65535)
    log_level: str = "INFO"
    json_logs: bool = True

    # Routing prefix for mounted web services, e.g. /ws/<name>/<path>
    path_prefix: str = "/ws"

    # Envelope
    response_key: str = Field(default="response", min_length=1)
    content_type: str = "application/json;charset=UTF-8"

    # Fallback for verbs a service does not implement
    not_implemented_message: str = "HTTP Method not implemented"
    not_implemented_status: int = -1

    model_config = {"env_prefix": "WEBSERVICE_"}
