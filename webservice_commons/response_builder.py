"""Builder for JSON REST response envelopes.

A builder accumulates the fields of one envelope and serializes it wrapped
under the top-level response key::

    ResponseBuilder().with_status(0).with_data({"id": 1}).with_no_records(1)
    # {"response":{"status":0,"data":[{"id":1}],"totalRows":1}}

    ResponseBuilder().with_status(-4).with_error("Validation failed")
    # {"response":{"status":-4,"error":{"message":"Validation failed"}}}

Builders are immutable: every ``with_*`` call returns a new builder and
leaves the receiver untouched, so a builder can be shared or reused without
one response leaking into another.

Usage invariant: a response is either success-shaped (``data`` and
optionally ``totalRows``) or error-shaped (``error``). The builder accepts
both on one instance and only logs a warning when serializing such an
envelope; ``success()`` and ``failure()`` build the two shapes in one call.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any

from pydantic_core import PydanticSerializationError, to_jsonable_python

from webservice_commons.errors import InvalidArgumentError, SerializationError
from webservice_commons.models.envelope import (
    KEY_DATA,
    KEY_ERROR,
    KEY_MESSAGE,
    KEY_RESPONSE,
    KEY_STATUS,
    KEY_TOTAL_ROWS,
    STATUS_SUCCESS,
)

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def _require(value: Any, name: str) -> None:
    if value is None:
        raise InvalidArgumentError(f"'{name}' must not be None", field=name)


def _require_int(value: Any, name: str) -> None:
    _require(value, name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(
            f"'{name}' must be an integer, got {type(value).__name__}", field=name
        )


@dataclass(frozen=True)
class ResponseBuilder:
    """Immutable accumulator for one response envelope.

    Parameters
    ----------
    response_key:
        Top-level key the envelope is wrapped under.
    strict:
        When ``False`` (default) a value that cannot be represented as JSON
        is logged and its field is left unset. When ``True`` a
        ``SerializationError`` is raised instead.
    """

    response_key: str = KEY_RESPONSE
    strict: bool = False
    status: int | None = None
    data: tuple[Any, ...] | None = None
    total_rows: int | None = None
    error: Any = None

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def success(
        cls,
        data: Any,
        total_rows: int | None = None,
        status: int = STATUS_SUCCESS,
        **options: Any,
    ) -> ResponseBuilder:
        """Build a success-shaped envelope: ``status``, ``data``, ``totalRows``."""
        builder = cls(**options).with_status(status).with_data(data)
        if total_rows is not None:
            builder = builder.with_no_records(total_rows)
        return builder

    @classmethod
    def failure(cls, error: Any, status: int = -1, **options: Any) -> ResponseBuilder:
        """Build an error-shaped envelope: ``status`` and ``error``."""
        return cls(**options).with_status(status).with_error(error)

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def with_status(self, code: int) -> ResponseBuilder:
        """Set ``status``. Negative values conventionally mean failure."""
        _require_int(code, KEY_STATUS)
        return replace(self, status=code)

    def with_data(self, data: Any) -> ResponseBuilder:
        """Set ``data``.

        A ``list`` or ``tuple`` is used as the data sequence. Any other value
        is wrapped into a one-element sequence (see ``with_item``).
        """
        _require(data, KEY_DATA)
        if not isinstance(data, (list, tuple)):
            return self.with_item(data)

        items = self._to_json(list(data), KEY_DATA)
        if items is _UNSET:
            return self
        return replace(self, data=tuple(items))

    def with_item(self, item: Any) -> ResponseBuilder:
        """Set ``data`` to a single-element sequence holding *item*."""
        _require(item, KEY_DATA)
        return self.with_data([item])

    def with_error(self, error: Any) -> ResponseBuilder:
        """Set ``error``.

        A string is wrapped as ``{"message": error}``; any other value is
        used as the structured error as is.
        """
        _require(error, KEY_ERROR)
        if isinstance(error, str):
            return self.with_error({KEY_MESSAGE: error})

        value = self._to_json(error, KEY_ERROR)
        if value is _UNSET:
            return self
        return replace(self, error=value)

    def with_no_records(self, count: int) -> ResponseBuilder:
        """Set ``totalRows``. Leave it out of error responses."""
        _require_int(count, KEY_TOTAL_ROWS)
        return replace(self, total_rows=count)

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def build(self) -> dict[str, Any]:
        """Return the wrapped envelope as a fresh dict."""
        envelope: dict[str, Any] = {}
        if self.status is not None:
            envelope[KEY_STATUS] = self.status
        if self.data is not None:
            envelope[KEY_DATA] = list(self.data)
        if self.total_rows is not None:
            envelope[KEY_TOTAL_ROWS] = self.total_rows
        if self.error is not None:
            envelope[KEY_ERROR] = self.error

        if self.error is not None and (self.data is not None or self.total_rows is not None):
            logger.warning(
                "Response envelope carries both error and data fields",
                extra={"response_status": self.status},
            )

        return {self.response_key: envelope}

    def build_as_string(self) -> str:
        """Serialize the wrapped envelope to compact JSON."""
        return json.dumps(self.build(), separators=(",", ":"), ensure_ascii=False)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _to_json(self, value: Any, key: str) -> Any:
        """Normalize *value* to plain JSON data, or ``_UNSET`` on failure."""
        try:
            jsonable = to_jsonable_python(value)
            json.dumps(jsonable, allow_nan=False)
        except (PydanticSerializationError, TypeError, ValueError) as exc:
            if self.strict:
                raise SerializationError(
                    f"Field '{key}' is not JSON serializable: {exc}", field=key
                ) from exc
            logger.error("Dropping field %r from response envelope: %s", key, exc)
            return _UNSET
        return jsonable
