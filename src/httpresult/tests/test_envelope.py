"""Tests for the JSON codec and the result envelope."""

from __future__ import annotations

import datetime as dt

import pytest
from pydantic import BaseModel

from httpresult.foundation.errors import CodecError, Error, HttpError, ProblemDetails
from httpresult.io import (
    JsonOptions,
    apply_envelope,
    dump_envelope,
    dump_error,
    get_codec,
    is_envelope,
    load_error,
    load_errors,
)
from httpresult.result import HttpResult, Result


class Forecast(BaseModel):
    date: dt.date
    temperature_c: int
    summary: str | None = None


CAMEL = JsonOptions()
SNAKE = JsonOptions(naming_policy="none", case_insensitive=False)


# ═════════════════════════════════════════════════════════════════════════════
# Writing
# ═════════════════════════════════════════════════════════════════════════════


def test_dump_plain_result() -> None:
    result = Result[int]().with_value(5).with_error("THIS IS ERROR", "ERROR_CODE_123")
    assert dump_envelope(result, CAMEL) == {
        "value": 5,
        "hasValue": True,
        "errors": [{"message": "THIS IS ERROR", "code": "ERROR_CODE_123", "detail": None}],
        "isSuccess": False,
    }


def test_dump_http_result_includes_status() -> None:
    envelope = dump_envelope(HttpResult[int]().with_status_code(404), CAMEL)
    assert envelope["statusCode"] == 404
    assert envelope["errors"] == [{"message": "StatusCode: 404", "code": "NOT_FOUND", "detail": {"status": 404}}]
    assert envelope["value"] is None
    assert envelope["hasValue"] is False


def test_dump_with_python_names() -> None:
    envelope = dump_envelope(HttpResult().with_value(1), SNAKE)
    assert set(envelope) == {"value", "has_value", "errors", "is_success", "status_code"}


def test_dump_error_inner_errors() -> None:
    err = Error(message="outer").with_inner_error(Error(message="inner", code="I"))
    assert dump_error(err, CAMEL)["innerErrors"] == [{"message": "inner", "code": "I", "detail": None}]


def test_serialize_model_value() -> None:
    result = Result[list[Forecast]]().with_value([Forecast(date=dt.date(2024, 1, 2), temperature_c=21)])
    text = get_codec().serialize(dump_envelope(result, CAMEL), CAMEL)
    assert '"date":"2024-01-02"' in text
    assert '"hasValue":true' in text


# ═════════════════════════════════════════════════════════════════════════════
# Detection
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("obj", "expected"),
    [
        ({"value": 1, "hasValue": True, "errors": [], "isSuccess": True}, True),
        ({"Value": 1, "HASVALUE": True, "Errors": [], "IsSuccess": True, "StatusCode": 200}, True),
        ({"errors": []}, True),
        ({}, True),
        ({"value": 1, "other": 2}, False),
        ({"title": "Not Found", "status": 404}, False),
        ([1, 2], False),
        ("text", False),
        (None, False),
    ],
)
def test_is_envelope(obj: object, expected: bool) -> None:
    assert is_envelope(obj, CAMEL) is expected


def test_is_envelope_case_sensitive() -> None:
    strict = JsonOptions(case_insensitive=False)
    assert is_envelope({"hasValue": True}, strict)
    assert not is_envelope({"HasValue": True}, strict)


# ═════════════════════════════════════════════════════════════════════════════
# Reading
# ═════════════════════════════════════════════════════════════════════════════


def test_load_error_plain() -> None:
    err = load_error({"Message": "m", "Code": "C", "Detail": {"field": "x"}}, CAMEL)
    assert type(err) is Error
    assert (err.message, err.code, err.detail) == ("m", "C", {"field": "x"})


def test_load_error_with_problem_details_is_http_error() -> None:
    err = load_error({"message": "m", "code": "UNAUTHORIZED", "detail": {"title": "Unauthorized", "status": 401}}, CAMEL)
    assert isinstance(err, HttpError)
    assert err.status_code == 401
    assert isinstance(err.problem_details, ProblemDetails)


def test_load_errors_nested_and_non_list() -> None:
    errors = load_errors([{"message": "a", "innerErrors": [{"message": "b"}]}], CAMEL)
    assert errors[0].inner_errors[0].message == "b"
    assert load_errors({"message": "a"}, CAMEL) == []


def test_envelope_round_trip_through_text() -> None:
    codec = get_codec()
    original = (
        HttpResult[list[Forecast]]()
        .with_value([Forecast(date=dt.date(2024, 5, 1), temperature_c=12, summary="Cool")])
        .with_status_code(409, ProblemDetails(title="Conflict"))
    )
    text = codec.serialize(dump_envelope(original, CAMEL), CAMEL)

    document = codec.loads(text)
    assert is_envelope(document, CAMEL)
    rebuilt = apply_envelope(
        HttpResult[list[Forecast]](), document,
        value_type=list[Forecast], transport_status=409, options=CAMEL, codec=codec,
    )

    assert rebuilt.value == original.value
    assert rebuilt.has_value
    assert rebuilt.status_code == original.status_code == 409
    assert rebuilt.http_error.status_code == original.http_error.status_code
    assert rebuilt.http_error.problem_details.title == "Conflict"


def test_apply_envelope_plain_result_uses_transport_status() -> None:
    document = dump_envelope(Result().with_error("THIS IS ERROR", "ERROR_CODE_123"), CAMEL)
    rebuilt = apply_envelope(HttpResult(), document, transport_status=200, options=CAMEL)
    assert rebuilt.status_code == 200
    assert rebuilt.is_error
    assert rebuilt.error.code == "ERROR_CODE_123"


def test_apply_envelope_missing_has_value_uses_value() -> None:
    rebuilt = apply_envelope(HttpResult(), {"value": {"a": 1}}, options=CAMEL)
    assert rebuilt.has_value
    assert rebuilt.value == {"a": 1}
    assert rebuilt.status_code == 200


def test_apply_envelope_non_2xx_status_without_errors_synthesizes() -> None:
    rebuilt = apply_envelope(HttpResult(), {"statusCode": 404, "errors": []}, options=CAMEL)
    assert rebuilt.status_code == 404
    assert rebuilt.http_error.status_code == 404


def test_apply_envelope_bad_value_raises_codec_error() -> None:
    with pytest.raises(CodecError):
        apply_envelope(HttpResult[int](), {"value": "not a number", "hasValue": True}, value_type=int, options=CAMEL)


# ═════════════════════════════════════════════════════════════════════════════
# Codec
# ═════════════════════════════════════════════════════════════════════════════


def test_codec_loads_invalid_json() -> None:
    with pytest.raises(CodecError) as info:
        get_codec().loads("<html>oops</html>")
    assert info.value.snippet == "<html>oops</html>"


def test_codec_snippet_truncated(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTPRESULT_CLIENT_BODY_SNIPPET_LENGTH", "4")
    with pytest.raises(CodecError) as info:
        get_codec().loads("not json at all")
    assert info.value.snippet == "not ..."


def test_codec_deserialize_typed() -> None:
    assert get_codec().deserialize("[1, 2]", list[int]) == [1, 2]
    assert get_codec().deserialize('{"a": 1}') == {"a": 1}


def test_codec_indent() -> None:
    assert "\n" in get_codec().serialize({"a": 1}, JsonOptions(indent=True))
