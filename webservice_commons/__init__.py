"""JSON REST response envelopes and default HTTP-verb dispatch."""

from webservice_commons.errors import (
    BadRequestError,
    InvalidArgumentError,
    MethodNotImplementedError,
    NotFoundError,
    SerializationError,
    WebServiceError,
    WriteError,
)
from webservice_commons.response_builder import ResponseBuilder
from webservice_commons.services.transport import (
    read_request_body_as_text,
    send_error_response,
    write_response,
)
from webservice_commons.services.web_service import HttpMethod, WebService

__all__ = [
    "BadRequestError",
    "HttpMethod",
    "InvalidArgumentError",
    "MethodNotImplementedError",
    "NotFoundError",
    "ResponseBuilder",
    "SerializationError",
    "WebService",
    "WebServiceError",
    "WriteError",
    "read_request_body_as_text",
    "send_error_response",
    "write_response",
]
