"""Middleware package: exception handlers and request ID."""

from webservice_commons.middleware.error_handler import register_error_handlers
from webservice_commons.middleware.request_id import RequestIdMiddleware

__all__ = [
    "RequestIdMiddleware",
    "register_error_handlers",
]
