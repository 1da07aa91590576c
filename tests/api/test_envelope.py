"""Response Envelope - tests for the JSON wire shape and encode failures.

Tests cover:
    - Success envelope carries data and no error
    - Models, ints and lists encode through the same path
    - None fields inside the payload survive; only empty envelope fields are omitted
    - Unencodable values (including NaN and infinities) raise EnvelopeEncodingError
    - json_response answers a detail-free 500 and never a partial JSON body
"""

import json
from typing import Any

import pytest
from pydantic import BaseModel

from lazyrest.api.envelope import ResponseEnvelope, encode_envelope, json_response
from lazyrest.core.errors import EnvelopeEncodingError
from lazyrest.schemas.record import Record


class Holder(BaseModel):
    value: Any = None


class Reading(BaseModel):
    id: int
    note: str | None = None
    score: float = 0.0


def test_success_envelope_has_no_error_key():
    body = json.loads(encode_envelope(7))
    assert body == {"data": 7}


def test_model_payload_encoded_as_object():
    body = json.loads(encode_envelope(Record(id=3, name="A")))
    assert body == {"data": {"id": 3, "name": "A"}}


def test_list_payload_encoded():
    body = json.loads(encode_envelope([Record(id=1, name="x")]))
    assert body["data"] == [{"id": 1, "name": "x"}]


def test_error_envelope_shape():
    envelope = ResponseEnvelope(error="boom")
    assert json.loads(envelope.to_json()) == {
        "error": "boom",
    }


def test_nested_none_fields_are_kept():
    body = json.loads(encode_envelope(Reading(id=1, note=None, score=1.0)))
    assert body == {"data": {"id": 1, "note": None, "score": 1.0}}


def test_none_fields_kept_inside_lists():
    body = json.loads(encode_envelope([Reading(id=1), Reading(id=2, note="x")]))
    assert body["data"][0]["note"] is None
    assert body["data"][1]["note"] == "x"


def test_none_data_omitted():
    assert json.loads(encode_envelope(None)) == {}


def test_unencodable_value_raises():
    with pytest.raises(EnvelopeEncodingError):
        encode_envelope(object())


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_float_raises(value):
    with pytest.raises(EnvelopeEncodingError):
        encode_envelope(Reading(id=1, score=value))


def test_non_finite_float_in_list_raises():
    with pytest.raises(EnvelopeEncodingError):
        encode_envelope({"scores": [1.0, float("nan")]})


def test_json_response_on_nan_is_generic_500():
    response = json_response(Reading(id=1, score=float("nan")))
    assert response.status_code == 500
    assert response.body == b"Internal Server Error"


def test_unencodable_nested_value_raises():
    with pytest.raises(EnvelopeEncodingError):
        encode_envelope(Holder(value=object()))


def test_json_response_sets_content_type():
    response = json_response({"a": 1})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert json.loads(response.body) == {"data": {"a": 1}}


def test_json_response_on_unencodable_value_is_generic_500():
    response = json_response(object())
    assert response.status_code == 500
    assert response.body == b"Internal Server Error"
    assert response.headers["content-type"].startswith("text/plain")
