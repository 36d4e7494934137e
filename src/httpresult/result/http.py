"""HTTP result: a Result with status code, response headers and transactions.

Status code rules:
    - Setting a non-2xx status on a result with no errors adds a default
      HttpError ("StatusCode: <code>")
    - Each appended error implies a status: its own for an HttpError, 500 otherwise
    - An explicit status in the same append always wins over implied ones
    - With nothing set: last error's status -> 500 on any error -> 200

Example:
    >>> result = HttpResult().with_status_code(404)
    >>> result.status_code, result.is_error, result.error.message
    (404, True, 'StatusCode: 404')

    >>> result = HttpResult().with_http_response_header("X", "a")
    >>> result.with_http_response_header_append("X", "b").response_headers["X"]
    ['a', 'b']
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Self, TypeVar

from httpresult.foundation.errors import Error, HttpError, ProblemDetails, is_success_status

from .append import HttpResultAppend, ResultAppend
from .result import Result

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from httpresult.client.transaction import HttpTransaction, StringHttpTransaction

T = TypeVar("T")


@dataclass(slots=True)
class HttpMeta:
    """HTTP metadata attached to a result."""

    status_code: int | None = None
    response_headers: dict[str, list[str]] = field(default_factory=dict)
    transactions: list[HttpTransaction] = field(default_factory=list)

    def header_key(self, name: str) -> str:
        """Existing key matching ``name`` case-insensitively, else ``name``."""
        lowered = name.lower()
        return next((k for k in self.response_headers if k.lower() == lowered), name)

    def append_header(self, name: str, values: Sequence[str]) -> None:
        key = self.header_key(name)
        self.response_headers.setdefault(key, []).extend(values)

    def replace_header(self, name: str, values: Sequence[str]) -> None:
        self.response_headers[self.header_key(name)] = list(values)

    def copy(self) -> HttpMeta:
        return HttpMeta(
            status_code=self.status_code,
            response_headers={k: list(v) for k, v in self.response_headers.items()},
            transactions=list(self.transactions),
        )


def implied_status(error: Error) -> int:
    """Status an appended error implies: an HttpError's own status, else 500."""
    if isinstance(error, HttpError) and error.status_code:
        return error.status_code
    return int(HTTPStatus.INTERNAL_SERVER_ERROR)


class HttpResult(Result[T]):
    """Result specialized for HTTP: status code, response headers, transactions.

    Usable on both sides of the wire: servers build one and hand
    ``get_response()`` to the framework; clients receive one from ``execute``.
    """

    __slots__ = ("_meta",)

    def __init__(self) -> None:
        super().__init__()
        self._meta = HttpMeta()

    # ─── Factories ───────────────────────────────────────────────────

    @classmethod
    def from_status_code(cls, status: int) -> Self:
        return cls().with_status_code(status)

    # ─── State ───────────────────────────────────────────────────────

    @property
    def status_code(self) -> int:
        if self._meta.status_code is not None:
            return self._meta.status_code
        if self._errors:
            return implied_status(self._errors[-1])
        return int(HTTPStatus.OK)

    @property
    def http_error(self) -> HttpError | None:
        error = self.error
        return error if isinstance(error, HttpError) else None

    @property
    def response_headers(self) -> dict[str, list[str]]:
        """Copy of the header map (name -> ordered values)."""
        return {k: list(v) for k, v in self._meta.response_headers.items()}

    def get_response_header(self, name: str) -> list[str] | None:
        """Values of a header, matched case-insensitively."""
        key = self._meta.header_key(name)
        values = self._meta.response_headers.get(key)
        return list(values) if values is not None else None

    @property
    def transactions(self) -> tuple[HttpTransaction, ...]:
        return tuple(self._meta.transactions)

    # ─── Append Protocol ─────────────────────────────────────────────

    def append(self, update: ResultAppend) -> None:
        """Merge a partial update, applying the HTTP rules before the base rules.

        Order: default-error synthesis -> headers -> transactions -> status implied
        by appended errors -> status and headers cascaded from sub-results ->
        explicit status -> value and errors.
        """
        meta = self._meta
        explicit: int | None = None

        if isinstance(update, HttpResultAppend):
            if update.should_append_status_code or update.should_append_status_code_or_error:
                explicit = update.status_code
            if update.should_append_status_code_or_error and explicit is not None:
                update = self._synthesize_error(update, explicit)

            if update.response_headers:
                for name, values in update.response_headers.items():
                    if update.should_replace_headers:
                        meta.replace_header(name, values)
                    elif update.should_append_headers:
                        meta.append_header(name, values)

            if update.should_append_transactions and update.transactions:
                meta.transactions.extend(update.transactions)

        if update.should_append_errors or update.should_replace_errors:
            for error in update.errors or ():
                if error is not None:
                    meta.status_code = implied_status(error)

        cascading = update.should_append_result_errors or update.should_append_result_values
        for result in update.results or ():
            if cascading and isinstance(result, HttpResult):
                meta.status_code = result.status_code
                for name, values in result._meta.response_headers.items():
                    meta.replace_header(name, values)
                meta.transactions.extend(result._meta.transactions)

        if explicit is not None:
            meta.status_code = int(explicit)

        super().append(update)

    def _synthesize_error(self, update: HttpResultAppend, status: int) -> HttpResultAppend:
        if is_success_status(status) or self._errors:
            return update
        if update.should_append_errors and any(e is not None for e in update.errors or ()):
            return update
        synthesized = HttpError().set_status_code(status)
        return dataclasses.replace(update, errors=[synthesized], should_append_errors=True)

    # ─── Builders ────────────────────────────────────────────────────

    def with_status_code(
        self,
        status: int,
        problem_details: ProblemDetails | None = None,
        *,
        message: str | None = None,
        error_code: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        instance: str | None = None,
        problem_type: str | None = None,
        extensions: Mapping[str, Any] | None = None,
    ) -> Self:
        """Set the status code.

        With only a status, a non-2xx code on an error-free result adds a default
        HttpError. With a problem-details payload or any discrete field, an
        HttpError carrying it is always added, even for 2xx codes.
        """
        fields = dict(message=message, error_code=error_code, title=title, detail=detail,
                      instance=instance, problem_type=problem_type, extensions=extensions)
        if problem_details is None and all(v is None for v in fields.values()):
            self.append(HttpResultAppend(status_code=status, should_append_status_code_or_error=True))
            return self
        error = HttpError().set_status_code(status, problem_details, **fields)
        self.append(HttpResultAppend(
            errors=[error], should_append_errors=True,
            status_code=status, should_append_status_code=True,
        ))
        return self

    def with_http_response_header(self, name: str, *values: str) -> Self:
        """Replace the named header's values."""
        self.append(HttpResultAppend(response_headers={name: values}, should_replace_headers=True))
        return self

    def with_http_response_header_append(self, name: str, *values: str) -> Self:
        """Append values to the named header, creating it if absent."""
        self.append(HttpResultAppend(response_headers={name: values}, should_append_headers=True))
        return self

    def with_transaction(self, *transactions: HttpTransaction) -> Self:
        self.append(HttpResultAppend(transactions=transactions, should_append_transactions=True))
        return self

    # ─── Conversion ──────────────────────────────────────────────────

    def clone(self) -> Self:
        twin = super().clone()
        twin._meta = self._meta.copy()
        return twin

    async def get_transaction_contents_as_string(self) -> list[StringHttpTransaction]:
        """Read every recorded transaction's bodies concurrently, in recording order."""
        from httpresult.client.transaction import read_transactions
        return await read_transactions(self._meta.transactions)

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(status_code={self.status_code}, value={self._value!r}, errors={self._errors!r})"
