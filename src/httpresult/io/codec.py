"""JSON codec for envelopes and values.

orjson does the byte-level work; Pydantic TypeAdapters validate decoded data
into the requested type and turn models into JSON-ready data on write.

Usage:
    >>> from httpresult.io import get_codec, JsonOptions
    >>> codec = get_codec()
    >>> codec.serialize({"hasValue": True})
    '{"hasValue":true}'
    >>> codec.deserialize("[1, 2]", list[int])
    [1, 2]
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Protocol, runtime_checkable

import orjson
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

from httpresult.foundation.config import get_settings
from httpresult.foundation.errors import CodecError


class JsonOptions(BaseModel):
    """Codec configuration.

    Attributes:
        naming_policy: "camel" writes camelCase property names, "none" keeps
            Python field names
        case_insensitive: Match envelope property names ignoring case on read
        indent: Pretty-print with two-space indentation
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    naming_policy: Literal["camel", "none"] = "camel"
    case_insensitive: bool = True
    indent: bool = False

    @classmethod
    def default(cls) -> JsonOptions:
        """Options from the environment settings."""
        s = get_settings().serialization
        return cls(naming_policy=s.naming_policy, case_insensitive=s.case_insensitive, indent=s.indent)

    @property
    def by_alias(self) -> bool:
        return self.naming_policy == "camel"

    def name(self, field_name: str) -> str:
        """Wire name of a snake_case field under this policy."""
        return to_camel(field_name) if self.naming_policy == "camel" else field_name


@runtime_checkable
class JsonCodec(Protocol):
    """Protocol for JSON codecs."""

    name: str
    content_type: str

    def to_jsonable(self, value: Any, options: JsonOptions | None = None) -> Any: ...
    def serialize(self, value: Any, options: JsonOptions | None = None) -> str: ...
    def loads(self, text: str | bytes) -> Any: ...
    def validate(self, data: Any, target_type: Any) -> Any: ...
    def deserialize(self, text: str | bytes, target_type: Any = None, options: JsonOptions | None = None) -> Any: ...


@lru_cache(maxsize=256)
def _adapter(target_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target_type)


def snippet(text: str | bytes, limit: int | None = None) -> str:
    """Leading part of a body for diagnostics."""
    limit = limit or get_settings().client.body_snippet_length
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")
    return text if len(text) <= limit else f"{text[:limit]}..."


class OrjsonCodec:
    """orjson codec with Pydantic validation for typed reads.

    Features: native datetime/uuid/dataclass support from orjson, Pydantic
    models and arbitrary annotated types through TypeAdapter.
    """

    __slots__ = ()
    name = "orjson"
    content_type = "application/json"

    def to_jsonable(self, value: Any, options: JsonOptions | None = None) -> Any:
        opts = options or JsonOptions.default()
        return to_jsonable_python(value, by_alias=opts.by_alias)

    def serialize(self, value: Any, options: JsonOptions | None = None) -> str:
        opts = options or JsonOptions.default()
        flags = orjson.OPT_NON_STR_KEYS | (orjson.OPT_INDENT_2 if opts.indent else 0)
        return orjson.dumps(
            value,
            default=lambda o: to_jsonable_python(o, by_alias=opts.by_alias),
            option=flags,
        ).decode()

    def loads(self, text: str | bytes) -> Any:
        """Parse JSON text.

        Raises:
            CodecError: If the text is not valid JSON
        """
        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise CodecError(f"Invalid JSON: {e}", snippet(text)) from e

    def validate(self, data: Any, target_type: Any) -> Any:
        """Validate decoded data into ``target_type`` (no-op when it is None).

        Raises:
            CodecError: If the data does not match the type
        """
        if target_type is None:
            return data
        try:
            return _adapter(target_type).validate_python(data)
        except ValidationError as e:
            shown = data if isinstance(data, (str, bytes)) else self.serialize(data, JsonOptions(naming_policy="none"))
            raise CodecError(
                f"Cannot convert to {getattr(target_type, '__name__', target_type)}: {e.error_count()} validation error(s)",
                snippet(shown),
            ) from e

    def deserialize(self, text: str | bytes, target_type: Any = None, options: JsonOptions | None = None) -> Any:
        return self.validate(self.loads(text), target_type)


_ORJSON = OrjsonCodec()


def get_codec() -> OrjsonCodec:
    """Default codec instance."""
    return _ORJSON
