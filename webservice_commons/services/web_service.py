"""Verb dispatch for web services.

A ``WebService`` maps each HTTP method to an optional handler. Methods
without a handler answer with HTTP 501 and an error envelope::

    service = WebService()

    @service.get
    def list_orders(path, request, response):
        body = ResponseBuilder.success(load_orders(), total_rows=42)
        write_response(response, body.build_as_string())

Handler exceptions are not caught here; the host decides how to report them.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Mapping

from webservice_commons.errors import InvalidArgumentError
from webservice_commons.models.envelope import KEY_RESPONSE
from webservice_commons.services.transport import (
    JSON_CONTENT_TYPE,
    RequestLike,
    ResponseLike,
    WriteFailureHook,
    send_error_response,
)

if TYPE_CHECKING:
    from webservice_commons.config.settings import CommonsSettings

logger = logging.getLogger(__name__)

NOT_IMPLEMENTED_MESSAGE = "HTTP Method not implemented"
NOT_IMPLEMENTED_STATUS = -1
HTTP_NOT_IMPLEMENTED = 501

Handler = Callable[[str, RequestLike, ResponseLike], None]


class HttpMethod(str, Enum):
    """HTTP methods a web service can implement."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, method: "HttpMethod | str") -> "HttpMethod":
        """Return the ``HttpMethod`` for *method*, case-insensitively."""
        if isinstance(method, cls):
            return method
        if not isinstance(method, str):
            raise InvalidArgumentError(f"Unsupported HTTP method: {method!r}", method=method)
        try:
            return cls(method.upper())
        except ValueError:
            raise InvalidArgumentError(
                f"Unsupported HTTP method: {method!r}", method=method
            ) from None


class WebService:
    """Dispatch table from HTTP method to handler with a 501 fallback."""

    def __init__(
        self,
        handlers: Mapping[HttpMethod | str, Handler] | None = None,
        *,
        not_implemented_message: str = NOT_IMPLEMENTED_MESSAGE,
        not_implemented_status: int = NOT_IMPLEMENTED_STATUS,
        response_key: str = KEY_RESPONSE,
        content_type: str = JSON_CONTENT_TYPE,
        on_write_failure: WriteFailureHook | None = None,
    ) -> None:
        self._handlers: dict[HttpMethod, Handler] = {}
        self.not_implemented_message = not_implemented_message
        self.not_implemented_status = not_implemented_status
        self.response_key = response_key
        self.content_type = content_type
        self.on_write_failure = on_write_failure

        for method, handler in (handlers or {}).items():
            self.register(method, handler)

    @classmethod
    def from_settings(
        cls,
        settings: "CommonsSettings",
        handlers: Mapping[HttpMethod | str, Handler] | None = None,
        **kwargs: object,
    ) -> "WebService":
        """Create a service whose fallback and envelope follow *settings*."""
        service = cls(handlers, **kwargs)  # type: ignore[arg-type]
        service.apply_settings(settings)
        return service

    def apply_settings(self, settings: "CommonsSettings") -> None:
        """Take the response key, content type and fallback from *settings*."""
        self.not_implemented_message = settings.not_implemented_message
        self.not_implemented_status = settings.not_implemented_status
        self.response_key = settings.response_key
        self.content_type = settings.content_type

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, method: HttpMethod | str, handler: Handler) -> None:
        """Register *handler* for *method*.

        Raises
        ------
        ValueError
            If a handler for the same method is already registered.
        """
        http_method = HttpMethod.parse(method)
        if http_method in self._handlers:
            raise ValueError(f"Handler for method '{http_method.value}' is already registered")
        self._handlers[http_method] = handler
        logger.debug("Registered handler for method '%s'", http_method.value)

    def route(self, method: HttpMethod | str) -> Callable[[Handler], Handler]:
        """Decorator form of ``register``."""

        def decorator(handler: Handler) -> Handler:
            self.register(method, handler)
            return handler

        return decorator

    def get(self, handler: Handler) -> Handler:
        return self.route(HttpMethod.GET)(handler)

    def post(self, handler: Handler) -> Handler:
        return self.route(HttpMethod.POST)(handler)

    def put(self, handler: Handler) -> Handler:
        return self.route(HttpMethod.PUT)(handler)

    def delete(self, handler: Handler) -> Handler:
        return self.route(HttpMethod.DELETE)(handler)

    def implements(self, method: HttpMethod | str) -> bool:
        return HttpMethod.parse(method) in self._handlers

    @property
    def methods(self) -> list[HttpMethod]:
        """Methods with a registered handler."""
        return list(self._handlers.keys())

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(
        self,
        method: HttpMethod | str,
        path: str,
        request: RequestLike,
        response: ResponseLike,
    ) -> None:
        """Run the handler for *method*, or the not-implemented fallback."""
        http_method = HttpMethod.parse(method)
        handler = self._handlers.get(http_method)
        if handler is None:
            logger.info(
                "No handler for %s %s",
                http_method.value,
                path,
                extra={"method": http_method.value, "path": path},
            )
            self.not_implemented(path, request, response)
            return
        handler(path, request, response)

    def not_implemented(
        self, path: str, request: RequestLike, response: ResponseLike
    ) -> None:
        """Answer with HTTP 501 and the not-implemented error envelope."""
        send_error_response(
            response,
            HTTP_NOT_IMPLEMENTED,
            self.not_implemented_status,
            self.not_implemented_message,
            on_write_failure=self.on_write_failure,
            response_key=self.response_key,
            content_type=self.content_type,
        )

    def do_get(self, path: str, request: RequestLike, response: ResponseLike) -> None:
        self.dispatch(HttpMethod.GET, path, request, response)

    def do_post(self, path: str, request: RequestLike, response: ResponseLike) -> None:
        self.dispatch(HttpMethod.POST, path, request, response)

    def do_put(self, path: str, request: RequestLike, response: ResponseLike) -> None:
        self.dispatch(HttpMethod.PUT, path, request, response)

    def do_delete(self, path: str, request: RequestLike, response: ResponseLike) -> None:
        self.dispatch(HttpMethod.DELETE, path, request, response)
