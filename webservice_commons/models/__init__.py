"""Public models for the web-service commons."""

from webservice_commons.models.envelope import (
    KEY_DATA,
    KEY_ERROR,
    KEY_MESSAGE,
    KEY_RESPONSE,
    KEY_STATUS,
    KEY_TOTAL_ROWS,
    STATUS_SUCCESS,
    STATUS_VALIDATION_ERROR,
    ResponseEnvelope,
)

__all__ = [
    "KEY_DATA",
    "KEY_ERROR",
    "KEY_MESSAGE",
    "KEY_RESPONSE",
    "KEY_STATUS",
    "KEY_TOTAL_ROWS",
    "STATUS_SUCCESS",
    "STATUS_VALIDATION_ERROR",
    "ResponseEnvelope",
]
