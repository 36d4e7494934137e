"""Problem details (RFC 7807) payload carried by HTTP errors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from .types import JsonDict

_MEMBERS = ("type", "title", "status", "detail", "instance")


class ProblemDetails(BaseModel):
    """Structured error payload: type, title, status, detail, instance.

    Any other member is kept as an extension and written at the top level
    next to the standard members. Unset members are omitted on the wire.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    instance: str | None = None

    @property
    def extensions(self) -> JsonDict:
        return dict(self.model_extra or {})

    def to_wire(self) -> JsonDict:
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def build(
        cls,
        status: int | None = None,
        *,
        title: str | None = None,
        detail: str | None = None,
        instance: str | None = None,
        type: str | None = None,  # noqa: A002
        extensions: Mapping[str, Any] | None = None,
    ) -> ProblemDetails:
        return cls(type=type, title=title, status=status, detail=detail, instance=instance, **dict(extensions or {}))

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> ProblemDetails | None:
        """Parse a wire object, matching standard member names case-insensitively.

        Returns None when the standard members have incompatible types.
        """
        normalized = {(k.lower() if k.lower() in _MEMBERS else k): v for k, v in data.items()}
        try:
            return cls.model_validate(normalized)
        except ValidationError:
            return None


def status_of(detail: Any) -> int:
    """Numeric status of a problem-details payload (model or mapping), 0 if absent."""
    if isinstance(detail, ProblemDetails):
        return detail.status or 0
    if isinstance(detail, Mapping):
        for key, value in detail.items():
            if isinstance(key, str) and key.lower() == "status" and isinstance(value, int) and not isinstance(value, bool):
                return value
    return 0
