"""Property tests for response envelope construction.

Validates the wire shape produced by ResponseBuilder: data ordering,
single-value wrapping, error wrapping, status placement, failed setters and
idempotent serialization.
"""

from __future__ import annotations

import json
from itertools import permutations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from webservice_commons.errors import InvalidArgumentError
from webservice_commons.response_builder import ResponseBuilder


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

# Text without lone surrogates, which cannot be encoded as UTF-8
json_text = st.text(alphabet=st.characters(exclude_categories=("Cs",)), max_size=30)

json_scalars = (
    st.none()
    | st.booleans()
    | st.integers(min_value=-(2**53), max_value=2**53)
    | st.floats(allow_nan=False, allow_infinity=False)
    | json_text
)

json_values = st.recursive(
    json_scalars,
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(json_text, children, max_size=4),
    max_leaves=12,
)

# Values with_data() treats as one item: anything but None, a list or a tuple
single_values = json_scalars.filter(lambda v: v is not None) | st.dictionaries(
    json_text, json_values, max_size=3
)

status_codes = st.integers(min_value=-(2**31), max_value=2**31 - 1)
row_counts = st.integers(min_value=0, max_value=2**31 - 1)

_SETTERS = ("with_status", "with_data", "with_error", "with_no_records")


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(items=st.lists(json_values, max_size=8))
def test_data_sequence_is_kept_in_order(items: list) -> None:
    body = json.loads(ResponseBuilder().with_data(items).build_as_string())

    assert body["response"]["data"] == items
    assert "error" not in body["response"]


@settings(max_examples=100)
@given(value=single_values)
def test_single_value_equals_one_element_sequence(value: object) -> None:
    single = ResponseBuilder().with_data(value).build_as_string()
    wrapped = ResponseBuilder().with_data([value]).build_as_string()

    assert single == wrapped


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(message=json_text)
def test_error_message_is_wrapped(message: str) -> None:
    body = json.loads(ResponseBuilder().with_error(message).build_as_string())

    assert body["response"]["error"] == {"message": message}
    assert "data" not in body["response"]
    assert "totalRows" not in body["response"]


@settings(max_examples=100)
@given(status=status_codes, message=json_text)
def test_failure_factory_is_error_shaped(status: int, message: str) -> None:
    body = json.loads(ResponseBuilder.failure(message, status=status).build_as_string())

    assert body == {"response": {"status": status, "error": {"message": message}}}


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(
    status=status_codes,
    items=st.lists(json_values, max_size=4),
    rows=row_counts,
    order=st.sampled_from(list(permutations(range(3)))),
)
def test_status_is_independent_of_call_order(
    status: int, items: list, rows: int, order: tuple[int, ...]
) -> None:
    calls = [
        lambda b: b.with_status(status),
        lambda b: b.with_data(items),
        lambda b: b.with_no_records(rows),
    ]
    builder = ResponseBuilder()
    for index in order:
        builder = calls[index](builder)

    body = json.loads(builder.build_as_string())
    assert body["response"]["status"] == status
    assert body["response"]["totalRows"] == rows
    assert list(body["response"]) == ["status", "data", "totalRows"]


# ---------------------------------------------------------------------------
# Failed setters and idempotence
# ---------------------------------------------------------------------------


@settings(max_examples=100)
@given(
    status=status_codes,
    items=st.lists(json_values, max_size=4),
    setter=st.sampled_from(_SETTERS),
)
def test_none_argument_leaves_state_unchanged(status: int, items: list, setter: str) -> None:
    builder = ResponseBuilder().with_status(status).with_data(items)
    before = builder.build_as_string()

    with pytest.raises(InvalidArgumentError):
        getattr(builder, setter)(None)

    assert builder.build_as_string() == before


@settings(max_examples=100)
@given(
    status=status_codes,
    items=st.lists(json_values, max_size=4),
    rows=row_counts,
    error=st.one_of(json_text, st.dictionaries(json_text, json_values, max_size=3)),
)
def test_build_as_string_is_idempotent(status: int, items: list, rows: int, error: object) -> None:
    success = ResponseBuilder().with_status(status).with_data(items).with_no_records(rows)
    failure = ResponseBuilder().with_status(status).with_error(error)

    assert success.build_as_string() == success.build_as_string()
    assert failure.build_as_string() == failure.build_as_string()
