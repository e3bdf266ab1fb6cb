"""Wire model of the JSON REST response envelope.

Success and error responses share one shape, always wrapped under a single
top-level key:

    { "response": { "status": 0, "data": [...], "totalRows": 1 } }
    { "response": { "status": -1, "error": { "message": "..." } } }

``data``/``totalRows`` belong to success responses and ``error`` to failure
responses. The model does not forbid both being present; callers are
expected to produce one shape or the other.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

KEY_RESPONSE = "response"
KEY_STATUS = "status"
KEY_DATA = "data"
KEY_TOTAL_ROWS = "totalRows"
KEY_ERROR = "error"
KEY_MESSAGE = "message"

STATUS_SUCCESS = 0
STATUS_VALIDATION_ERROR = -4


class ResponseEnvelope(BaseModel):
    """Inner envelope carried under the top-level response key."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: int
    data: list[Any] | None = None
    total_rows: int | None = Field(default=None, alias=KEY_TOTAL_ROWS)
    error: Any | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def from_payload(
        cls, payload: dict[str, Any], response_key: str = KEY_RESPONSE
    ) -> "ResponseEnvelope":
        """Validate a decoded wire payload and return the inner envelope."""
        return cls.model_validate(payload[response_key])
