"""Append descriptors: the partial updates merged into a result.

A descriptor carries what changed (value, errors, sub-results, status code,
headers, transactions) plus flags saying how to combine each part. Results are
mutated only by passing a descriptor to ``append``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from httpresult.client.transaction import HttpTransaction
    from httpresult.foundation.errors import Error

    from .result import Result


@dataclass(slots=True)
class ResultAppend:
    """Partial update for a Result.

    Attributes:
        value: New value, stored when should_append_value is set
        errors: Errors to add (None entries are skipped)
        results: Sub-results whose value and/or errors cascade in
        should_append_value: Store ``value`` and mark the value present
        should_append_errors: Add ``errors`` after the existing ones
        should_replace_errors: Replace the existing errors with ``errors``
        should_append_result_values: Take each sub-result's value (including absence)
        should_append_result_errors: Add each sub-result's errors
    """

    value: Any = None
    errors: Sequence[Error | None] | None = None
    results: Sequence[Result[Any]] | None = None
    should_append_value: bool = False
    should_append_errors: bool = False
    should_replace_errors: bool = False
    should_append_result_values: bool = False
    should_append_result_errors: bool = False


@dataclass(slots=True)
class HttpResultAppend(ResultAppend):
    """Partial update for an HttpResult.

    Attributes:
        status_code: New status code
        response_headers: Header name -> values
        transactions: HTTP transactions to record
        should_append_status_code: Set ``status_code`` as given
        should_append_status_code_or_error: Set ``status_code``; a non-2xx code on a
            result with no errors also adds a default HttpError
        should_append_headers: Concatenate values onto existing headers
        should_replace_headers: Overwrite the named headers' values
        should_append_transactions: Record ``transactions``
    """

    status_code: int | None = None
    response_headers: Mapping[str, Sequence[str]] | None = None
    transactions: Sequence[HttpTransaction] | None = None
    should_append_status_code: bool = False
    should_append_status_code_or_error: bool = False
    should_append_headers: bool = False
    should_replace_headers: bool = False
    should_append_transactions: bool = False
