"""FastAPI exception handlers.

``WebServiceError`` subclasses, request validation errors, HTTP errors and
unhandled exceptions are all rendered as error-shaped envelopes:
``{ "response": { "status": <negative int>, "error": {...} } }``.
"""

from __future__ import annotations

import json
import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic_core import PydanticSerializationError, to_jsonable_python
from starlette.exceptions import HTTPException as StarletteHTTPException

from webservice_commons.errors import WebServiceError
from webservice_commons.models.envelope import (
    KEY_MESSAGE,
    KEY_RESPONSE,
    STATUS_VALIDATION_ERROR,
)
from webservice_commons.response_builder import ResponseBuilder

logger = logging.getLogger(__name__)

STATUS_FAILURE = -1


def _jsonable_details(details: dict[str, Any]) -> dict[str, Any]:
    """Return *details* as JSON data, stringifying values JSON cannot hold."""
    try:
        jsonable = to_jsonable_python(details, serialize_unknown=True)
        json.dumps(jsonable, allow_nan=False)
    except (PydanticSerializationError, ValueError):
        return {key: str(value) for key, value in details.items()}
    return jsonable


def register_error_handlers(app: FastAPI, response_key: str = KEY_RESPONSE) -> None:
    """Wire up all exception handlers on the FastAPI application."""

    def _envelope(status_code: int, validation_status: int, error: Any) -> JSONResponse:
        """Build an error envelope response."""
        content = ResponseBuilder.failure(
            error, status=validation_status, response_key=response_key
        ).build()
        return JSONResponse(status_code=status_code, content=content)

    async def _web_service_error_handler(
        request: Request, exc: WebServiceError
    ) -> JSONResponse:
        """Handle WebServiceError subclasses."""
        error: dict[str, Any] = {KEY_MESSAGE: exc.message}
        if exc.details:
            error["details"] = _jsonable_details(exc.details)
        logger.info(
            "%s: %s",
            type(exc).__name__,
            exc.message,
            extra={"method": request.method, "path": request.url.path, "http_status": exc.status_code},
        )
        return _envelope(exc.status_code, exc.validation_status, error)

    async def _validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI / Pydantic RequestValidationError (422)."""
        field_errors = [
            {
                "field": " -> ".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return _envelope(
            422,
            STATUS_VALIDATION_ERROR,
            {KEY_MESSAGE: "Validation error", "fields": field_errors},
        )

    async def _http_error_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle routing errors such as 404 and 405."""
        return _envelope(exc.status_code, STATUS_FAILURE, {KEY_MESSAGE: str(exc.detail)})

    async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions: log traceback, return generic 500."""
        logger.error(
            "Unhandled exception: %s\n%s",
            exc,
            traceback.format_exc(),
        )
        return _envelope(500, STATUS_FAILURE, {KEY_MESSAGE: "Internal server error"})

    app.add_exception_handler(WebServiceError, _web_service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
