"""JSON envelope for transmitting results over HTTP.

Wire shape (names follow the naming policy on write, matched case-insensitively
on read)::

    {
      "value": <T> | null,
      "hasValue": bool,
      "errors": [{"message": str, "code": str, "detail": <object|null>}, ...],
      "isSuccess": bool,
      "statusCode": int        # HttpResult only
    }

An error entry whose ``detail`` is an object with a numeric ``status`` member is
read back as an HttpError with ProblemDetails; anything else as a plain Error.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from httpresult.foundation.errors import Error, HttpError, ProblemDetails, status_of
from httpresult.result import HttpResult, HttpResultAppend, Result

from .codec import JsonOptions, get_codec

if TYPE_CHECKING:
    from httpresult.foundation.errors import JsonDict

    from .codec import JsonCodec

# Envelope members, folded (lowercase, no underscores)
_ENVELOPE_KEYS = frozenset({"value", "hasvalue", "errors", "issuccess", "statuscode"})
_ENVELOPE_FIELDS = ("value", "has_value", "errors", "is_success", "status_code")


def _fold(key: str) -> str:
    return key.replace("_", "").lower()


def _member(obj: Mapping[str, Any], field: str, options: JsonOptions) -> tuple[bool, Any]:
    """Look up an envelope member; returns (present, value)."""
    if options.case_insensitive:
        wanted = _fold(field)
        for key, value in obj.items():
            if isinstance(key, str) and _fold(key) == wanted:
                return True, value
        return False, None
    name = options.name(field)
    return (name in obj), obj.get(name)


# ─────────────────────────────────────────────────────────────────────────────
# Write
# ─────────────────────────────────────────────────────────────────────────────


def dump_detail(detail: Any, options: JsonOptions, codec: JsonCodec) -> Any:
    if detail is None:
        return None
    if isinstance(detail, ProblemDetails):
        return detail.to_wire()
    return codec.to_jsonable(detail, options)


def dump_error(error: Error, options: JsonOptions | None = None, codec: JsonCodec | None = None) -> JsonDict:
    """Wire form of an error: message, code, detail (+ innerErrors when nested)."""
    opts = options or JsonOptions.default()
    codec = codec or get_codec()
    data: JsonDict = {
        opts.name("message"): error.message,
        opts.name("code"): error.code,
        opts.name("detail"): dump_detail(error.detail, opts, codec),
    }
    if error.inner_errors:
        data[opts.name("inner_errors")] = [dump_error(e, opts, codec) for e in error.inner_errors]
    return data


def dump_envelope(result: Result[Any], options: JsonOptions | None = None, codec: JsonCodec | None = None) -> JsonDict:
    """JSON-ready envelope for a Result or HttpResult."""
    opts = options or JsonOptions.default()
    codec = codec or get_codec()
    data: JsonDict = {
        opts.name("value"): codec.to_jsonable(result.value, opts) if result.has_value else None,
        opts.name("has_value"): result.has_value,
        opts.name("errors"): [dump_error(e, opts, codec) for e in result.errors],
        opts.name("is_success"): result.is_success,
    }
    if isinstance(result, HttpResult):
        data[opts.name("status_code")] = result.status_code
    return data


# ─────────────────────────────────────────────────────────────────────────────
# Read
# ─────────────────────────────────────────────────────────────────────────────


def is_envelope(obj: Any, options: JsonOptions | None = None) -> bool:
    """Whether a decoded document is an object made only of envelope members."""
    if not isinstance(obj, Mapping):
        return False
    opts = options or JsonOptions.default()
    if opts.case_insensitive:
        return all(isinstance(k, str) and _fold(k) in _ENVELOPE_KEYS for k in obj)
    names = {opts.name(f) for f in _ENVELOPE_FIELDS}
    return all(k in names for k in obj)


def load_error(raw: Any, options: JsonOptions | None = None) -> Error:
    """Rebuild an Error (or HttpError) from its wire form."""
    opts = options or JsonOptions.default()
    if not isinstance(raw, Mapping):
        return Error(message=None if raw is None else str(raw))

    _, message = _member(raw, "message", opts)
    _, code = _member(raw, "code", opts)
    _, detail = _member(raw, "detail", opts)
    _, inner = _member(raw, "inner_errors", opts)

    error: Error
    if isinstance(detail, Mapping) and status_of(detail):
        error = HttpError(message=_text(message), code=_text(code), detail=ProblemDetails.from_wire(detail) or dict(detail))
    else:
        error = Error(message=_text(message), code=_text(code), detail=detail)
    if isinstance(inner, list):
        error.with_inner_error(*(load_error(e, opts) for e in inner))
    return error


def load_errors(raw: Any, options: JsonOptions | None = None) -> list[Error]:
    """Rebuild the envelope error list; anything but a JSON array yields no errors."""
    return [load_error(e, options) for e in raw] if isinstance(raw, list) else []


def _text(value: Any) -> str | None:
    return value if value is None or isinstance(value, str) else str(value)


def apply_envelope(
    result: HttpResult[Any],
    obj: Mapping[str, Any],
    *,
    value_type: Any = None,
    transport_status: int | None = None,
    options: JsonOptions | None = None,
    codec: JsonCodec | None = None,
) -> HttpResult[Any]:
    """Append an envelope's value, errors and status into ``result``.

    The value is validated into ``value_type`` (kept as decoded JSON when None).
    A missing status falls back to ``transport_status``; the status is applied
    explicitly in the same append, so it wins over statuses implied by errors.

    Raises:
        CodecError: If the value does not match ``value_type``
    """
    opts = options or JsonOptions.default()
    codec = codec or get_codec()

    has_value_present, has_value = _member(obj, "has_value", opts)
    value_present, raw_value = _member(obj, "value", opts)
    _, raw_errors = _member(obj, "errors", opts)
    _, status = _member(obj, "status_code", opts)

    store_value = bool(has_value) if has_value_present else (value_present and raw_value is not None)
    value = None
    if store_value and raw_value is not None:
        value = codec.validate(raw_value, value_type)

    errors = load_errors(raw_errors, opts)
    if not isinstance(status, int) or isinstance(status, bool):
        status = transport_status

    result.append(HttpResultAppend(
        value=value,
        should_append_value=store_value,
        errors=errors,
        should_append_errors=bool(errors),
        status_code=status,
        should_append_status_code_or_error=status is not None,
    ))
    return result
