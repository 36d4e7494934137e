"""Exceptions raised at the opt-in boundary and wrapped by captured faults."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .errors import Error


class ResultError(Exception):
    """Exception wrapping an Error that carries no exception of its own.

    Raised by Result.throw_if_error().
    """

    __slots__ = ("error",)

    def __init__(self, error: Error) -> None:
        self.error = error
        super().__init__(str(error))


class CodecError(ValueError):
    """Body is not valid JSON or does not match the requested type.

    The message includes a snippet of the offending text for diagnosis.
    """

    __slots__ = ("snippet",)

    def __init__(self, reason: str, snippet: str = "") -> None:
        self.snippet = snippet
        super().__init__(f"{reason}. Body: {snippet!r}" if snippet else reason)


class RequestCanceledError(Exception):
    """Cooperative cancellation observed while a request was in flight."""


class InvalidRequestUriError(ValueError):
    """Request URI is relative and the client has no base address."""
