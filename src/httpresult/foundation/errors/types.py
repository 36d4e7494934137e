"""JSON type aliases shared by the error, codec and envelope layers."""

from __future__ import annotations

from typing import Any, TypeAlias, Union

# Any for recursive slots to avoid Pydantic resolution issues
JsonPrimitive: TypeAlias = Union[str, int, float, bool, None]
JsonValue: TypeAlias = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict: TypeAlias = dict[str, Any]
