"""Error hierarchy for web-service handlers and the response builder.

Every error carries the HTTP status it maps to (``status_code``), the
application-level ``validation_status`` written into the envelope and a
default ``message``. Extra keyword arguments end up in ``details``.
"""

from __future__ import annotations


class WebServiceError(Exception):
    """Base error for all web-service errors."""

    status_code: int = 500
    validation_status: int = -1
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class InvalidArgumentError(WebServiceError):
    """A builder setter or dispatch call received an absent or unusable value."""

    status_code = 400
    message = "Invalid argument"


class SerializationError(WebServiceError):
    """A value could not be represented as JSON."""

    status_code = 500
    message = "Value is not JSON serializable"


class WriteError(WebServiceError):
    """Writing the response body to the outbound stream failed."""

    status_code = 500
    message = "Failed to write response"


class MethodNotImplementedError(WebServiceError):
    """The web service does not implement the requested HTTP method."""

    status_code = 501
    message = "HTTP Method not implemented"


class BadRequestError(WebServiceError):
    """The request payload was rejected by the handler."""

    status_code = 400
    validation_status = -4
    message = "Bad request"


class NotFoundError(WebServiceError):
    """The requested resource does not exist."""

    status_code = 404
    message = "Not found"
