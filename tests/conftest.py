"""Shared test fixtures for the web-service test suite."""

from __future__ import annotations

import io
import os
from typing import MutableMapping, TextIO

import pytest

from webservice_commons.config.settings import CommonsSettings
from webservice_commons.routers.web_service import BufferedResponse


# ---------------------------------------------------------------------------
# Keep WEBSERVICE_* variables from the developer's shell out of the tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("WEBSERVICE_"):
            monkeypatch.delenv(key)


@pytest.fixture
def settings() -> CommonsSettings:
    return CommonsSettings(log_level="DEBUG", json_logs=False)


# ---------------------------------------------------------------------------
# Request / response doubles
# ---------------------------------------------------------------------------

class FailingWriter(io.StringIO):
    """Writer whose ``write`` always fails."""

    def write(self, s: str) -> int:
        raise OSError("connection reset by peer")


class FailingResponse:
    """Response sink whose writer cannot be written to."""

    def __init__(self) -> None:
        self.status_code: int = 200
        self.headers: MutableMapping[str, str] = {}
        self.writer = FailingWriter()

    def get_writer(self) -> TextIO:
        return self.writer


class AsciiWriter(io.StringIO):
    """Writer that can only encode ASCII text."""

    def write(self, s: str) -> int:
        s.encode("ascii")
        return super().write(s)


class AsciiResponse(FailingResponse):
    """Response sink backed by an ASCII-only writer."""

    def __init__(self) -> None:
        super().__init__()
        self.writer = AsciiWriter()


class ClosedResponse(FailingResponse):
    """Response sink whose writer was already closed."""

    def __init__(self) -> None:
        super().__init__()
        self.writer = io.StringIO()
        self.writer.close()


class UnavailableResponse(FailingResponse):
    """Response sink whose writer cannot even be obtained."""

    def get_writer(self) -> TextIO:
        raise OSError("stream already committed")


@pytest.fixture
def response() -> BufferedResponse:
    return BufferedResponse()


@pytest.fixture
def failing_response() -> FailingResponse:
    return FailingResponse()


@pytest.fixture
def unavailable_response() -> UnavailableResponse:
    return UnavailableResponse()


@pytest.fixture
def ascii_response() -> AsciiResponse:
    return AsciiResponse()


@pytest.fixture
def closed_response() -> ClosedResponse:
    return ClosedResponse()

