"""Error records attached to results.

An Error is a single failure record: human-readable message, machine-readable
code, optional structured detail, the causing exception and nested inner
errors. Uses Pydantic for validation and serialization; instances are mutated
only through the builder methods (with_*), which return the same instance.
"""

from __future__ import annotations

import copy
from enum import StrEnum
from functools import lru_cache
from typing import Any, Self

import httpx
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ErrorCode(StrEnum):
    """Codes assigned to errors produced by the execute pipeline.

    Errors created by callers carry whatever code the caller chose; these are
    only the codes the library itself emits for captured faults.
    """
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    CANCELED = "CANCELED"
    INVALID_URI = "INVALID_URI"
    UNKNOWN = "UNKNOWN"


class Error(BaseModel):
    """A single failure record.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        detail: Structured payload (e.g. problem details)
        exception: The causing exception, never serialized
        inner_errors: Nested errors for multi-error aggregation

    Example:
        >>> err = Error().with_message("THIS IS ERROR").with_code("ERROR_CODE_123")
        >>> err.code
        'ERROR_CODE_123'
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        alias_generator=to_camel,
        revalidate_instances="never",
    )

    message: str | None = None
    code: str | None = None
    detail: Any = Field(default=None, repr=False)
    exception: BaseException | None = Field(default=None, exclude=True, repr=False)
    inner_errors: list[Error] = Field(default_factory=list, repr=False)

    @model_validator(mode="after")
    def _default_message(self) -> Self:
        """Blank message falls back to the exception's message when an exception is present."""
        if not self.message and self.exception is not None:
            self.message = _exception_message(self.exception)
        return self

    # ─── Construction ────────────────────────────────────────────────

    @classmethod
    def from_exception(cls, exc: BaseException, message: str | None = None, code: str | None = None) -> Self:
        """Create from a caught exception; message defaults to the exception's message."""
        return cls(message=message or _exception_message(exc), code=code, exception=exc)

    # ─── Builders (mutate and return self) ───────────────────────────

    def with_message(self, message: str | None) -> Self:
        if not message and self.exception is not None:
            message = _exception_message(self.exception)
        self.message = message
        return self

    def with_code(self, code: str | None) -> Self:
        self.code = code
        return self

    def with_detail(self, detail: Any) -> Self:
        self.detail = detail
        return self

    def with_exception(self, exc: BaseException | None) -> Self:
        self.exception = exc
        if not self.message and exc is not None:
            self.message = _exception_message(exc)
        return self

    def with_inner_error(self, *errors: Error) -> Self:
        """Append nested errors (None entries are skipped)."""
        self.inner_errors.extend(e for e in errors if e is not None)
        return self

    # ─── Composition ─────────────────────────────────────────────────

    def clone(self) -> Self:
        """Copy with identical public state.

        Structured detail payloads and inner errors are deep-copied so the clone
        can be owned by another result; the exception reference is shared.
        """
        twin = self.model_copy()
        twin.detail = _copy_detail(self.detail)
        twin.inner_errors = [e.clone() for e in self.inner_errors]
        return twin

    def to_exception(self) -> BaseException:
        """The wrapped exception, or a ResultError synthesized from this error."""
        from .exceptions import ResultError
        return self.exception if self.exception is not None else ResultError(self)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}" if self.code else f"{self.message}"


def _exception_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _copy_detail(detail: Any) -> Any:
    if isinstance(detail, BaseModel):
        return detail.model_copy(deep=True)
    if isinstance(detail, (dict, list)):
        return copy.deepcopy(detail)
    return detail


# ─────────────────────────────────────────────────────────────────────────────
# Exception Classification
# ─────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=128)
def _classify_type(exc_type: type[BaseException]) -> ErrorCode:
    from .exceptions import CodecError, InvalidRequestUriError, RequestCanceledError

    if issubclass(exc_type, RequestCanceledError):
        return ErrorCode.CANCELED
    if issubclass(exc_type, CodecError):
        return ErrorCode.PARSE_ERROR
    if issubclass(exc_type, InvalidRequestUriError):
        return ErrorCode.INVALID_URI
    if issubclass(exc_type, httpx.TimeoutException):
        return ErrorCode.TIMEOUT
    if issubclass(exc_type, (httpx.TransportError, httpx.InvalidURL, OSError)):
        return ErrorCode.TRANSPORT_ERROR
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map a captured fault to its ErrorCode (cached per exception type)."""
    return _classify_type(type(exc))
