"""HTTP-specialized error carrying a status code and a problem-details payload."""

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from typing import Any, Self

from pydantic import PrivateAttr

from .errors import Error
from .problem import ProblemDetails, status_of


def status_name(status: int) -> str:
    """Upper-snake rendering of a status code (404 -> "NOT_FOUND")."""
    try:
        return HTTPStatus(status).name
    except ValueError:
        return str(status)


def is_success_status(status: int) -> bool:
    return 200 <= status <= 299


class HttpError(Error):
    """Error with an HTTP status code.

    The status code is resolved as: explicit value set via set_status_code ->
    the ``status`` member of the problem-details detail -> 0 (unset).

    Example:
        >>> err = HttpError().set_status_code(404)
        >>> err.status_code, err.code, err.message
        (404, 'NOT_FOUND', 'StatusCode: 404')
    """

    _status_code: int = PrivateAttr(default=0)

    @property
    def status_code(self) -> int:
        return self._status_code or status_of(self.detail)

    @property
    def problem_details(self) -> ProblemDetails | None:
        return self.detail if isinstance(self.detail, ProblemDetails) else None

    def set_status_code(
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
        """Set the status code and its problem-details payload.

        Without an explicit payload one is built from the discrete fields; any
        field left unset is omitted. ``code`` becomes the upper-snake status name
        unless ``error_code`` is given, and ``message`` becomes
        "StatusCode: <status>" unless a message was supplied now or earlier.
        """
        status = int(status)
        if problem_details is None:
            problem_details = ProblemDetails.build(
                title=title, detail=detail, instance=instance, type=problem_type, extensions=extensions,
            )
        problem_details.status = status
        self._status_code = status
        self.detail = problem_details
        self.code = error_code or status_name(status)
        if message:
            self.message = message
        elif not self.message:
            self.message = f"StatusCode: {status}"
        return self

    @classmethod
    def from_status_code(cls, status: int, problem_details: ProblemDetails | None = None, **fields: Any) -> Self:
        return cls().set_status_code(status, problem_details, **fields)
