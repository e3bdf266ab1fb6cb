"""Mounts a ``WebService`` on a FastAPI application.

- ANY {prefix}/{name}: dispatched with an empty path
- ANY {prefix}/{name}/{path}: dispatched with the remaining path

GET, POST, PUT and DELETE are forwarded to ``WebService.dispatch`` which
runs in the threadpool, since handlers read and write blocking streams.
"""

from __future__ import annotations

import io
import logging
from typing import MutableMapping, TextIO

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from webservice_commons.config.settings import CommonsSettings
from webservice_commons.services.web_service import HttpMethod, WebService

logger = logging.getLogger(__name__)


class BufferedRequest:
    """Request whose body has already been read into memory."""

    def __init__(self, body: str | None) -> None:
        self._body = body

    def get_reader(self) -> TextIO | None:
        if self._body is None:
            return None
        return io.StringIO(self._body)


class _CapturingWriter(io.StringIO):
    """StringIO that hands its content to the owning response on close."""

    def __init__(self, chunks: list[str]) -> None:
        super().__init__()
        self._chunks = chunks

    def close(self) -> None:
        if not self.closed:
            self._chunks.append(self.getvalue())
        super().close()


class BufferedResponse:
    """In-memory response sink, converted to a Starlette response afterwards."""

    def __init__(self) -> None:
        self.status_code: int = 200
        self.headers: MutableMapping[str, str] = {}
        self._chunks: list[str] = []

    def get_writer(self) -> TextIO:
        return _CapturingWriter(self._chunks)

    @property
    def body(self) -> str:
        return "".join(self._chunks)

    def to_starlette(self) -> Response:
        return Response(
            content=self.body.encode("utf-8"),
            status_code=self.status_code,
            headers=dict(self.headers),
        )


def create_web_service_router(
    name: str,
    service: WebService,
    settings: CommonsSettings | None = None,
) -> APIRouter:
    """Factory that creates a router forwarding requests to *service*.

    *service* takes its response key, content type and not-implemented
    fallback from *settings*, so every envelope the app sends shares one
    top-level key. Settings are loaded from the environment when omitted.
    """
    settings = settings or CommonsSettings()
    service.apply_settings(settings)
    prefix = settings.path_prefix

    router = APIRouter(prefix=f"{prefix.rstrip('/')}/{name.strip('/')}", tags=[name])

    async def endpoint(request: Request) -> Response:
        path = request.path_params.get("path", "")
        raw = await request.body()

        ws_request = BufferedRequest(raw.decode("utf-8", errors="replace"))
        ws_response = BufferedResponse()

        logger.debug(
            "Dispatching %s to web service %r",
            request.method,
            name,
            extra={"method": request.method, "path": path},
        )
        await run_in_threadpool(
            service.dispatch, request.method, path, ws_request, ws_response
        )
        return ws_response.to_starlette()

    methods = [method.value for method in HttpMethod]
    router.add_api_route("", endpoint, methods=methods, include_in_schema=False)
    router.add_api_route("/{path:path}", endpoint, methods=methods)

    return router
