"""Request/response plumbing shared by all web-service handlers.

The host environment supplies the request and response objects; they only
need to satisfy ``RequestLike`` and ``ResponseLike``.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, MutableMapping, Protocol, TextIO

from webservice_commons.errors import WriteError
from webservice_commons.models.envelope import KEY_RESPONSE
from webservice_commons.response_builder import ResponseBuilder

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json;charset=UTF-8"

WriteFailureHook = Callable[[WriteError], None]


class RequestLike(Protocol):
    """Inbound request exposing its body as a text stream."""

    def get_reader(self) -> TextIO | None: ...


class ResponseLike(Protocol):
    """Outbound response sink."""

    status_code: int
    headers: MutableMapping[str, str]

    def get_writer(self) -> TextIO: ...


# Line terminators recognised when reading request bodies
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def read_request_body_as_text(request: RequestLike) -> str:
    """Read the whole request body, joining its lines with ``\\n``.

    ``\\r\\n``, a lone ``\\r`` and ``\\n`` all end a line; a terminator after the
    last line is dropped. Returns an empty string when the request has no
    body stream.
    """
    reader = request.get_reader()
    if reader is None:
        return ""
    body = reader.read()
    if not body:
        return ""
    lines = _LINE_BREAK.split(body)
    if lines[-1] == "":
        lines.pop()
    return "\n".join(lines)


def write_response(
    response: ResponseLike,
    body: str,
    content_type: str = JSON_CONTENT_TYPE,
) -> None:
    """Write *body* to the response in one go and close the writer.

    The writer is closed even when the write fails, so callers that need to
    stream output must manage the writer themselves.

    Raises
    ------
    WriteError
        If the writer cannot be obtained or written to.
    """
    response.headers["Content-Type"] = content_type
    try:
        with response.get_writer() as writer:
            writer.write(body)
    except (OSError, ValueError) as exc:
        # ValueError covers encoding failures and writes to a closed stream
        raise WriteError(f"Failed to write response: {exc}") from exc


def send_error_response(
    response: ResponseLike,
    http_status: int,
    validation_status: int,
    message: str,
    *,
    on_write_failure: WriteFailureHook | None = None,
    response_key: str = KEY_RESPONSE,
    content_type: str = JSON_CONTENT_TYPE,
) -> None:
    """Set *http_status* and write an error envelope carrying *message*.

    Once the status is committed a failing write is logged and not raised.
    *on_write_failure* receives the ``WriteError``; it may re-raise it to
    make the failure fatal.
    """
    response.status_code = http_status

    body = (
        ResponseBuilder(response_key=response_key)
        .with_status(validation_status)
        .with_error(message)
        .build_as_string()
    )
    try:
        write_response(response, body, content_type)
    except WriteError as exc:
        logger.error(
            "Could not write error response: %s",
            exc.message,
            exc_info=exc,
            extra={"http_status": http_status},
        )
        if on_write_failure is not None:
            on_write_failure(exc)
