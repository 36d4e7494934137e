"""Result container for operation outcomes.

A Result carries an optional value and an ordered sequence of errors. Value
presence and error presence are independent: appending an error never clears a
value. State changes only through ``append`` and the builder methods layered on
it, each of which mutates the instance and returns it for chaining.

Example:
    >>> result = Result[int]().with_value(42)
    >>> result.is_success, result.value
    (True, 42)
    >>> result.with_error("boom", "E_BOOM").is_error
    True
    >>> result.value
    42

Cascading sub-call outcomes without exceptions:
    >>> def lookup() -> Result[int]:
    ...     return Result[int]().with_error("missing", "NOT_FOUND")
    >>> outer = Result[int]()
    >>> if not outer.success(lookup()):
    ...     outer.error.code
    'NOT_FOUND'
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar, get_args

from httpresult.foundation.errors import Error

from .append import ResultAppend

if TYPE_CHECKING:
    from collections.abc import Iterable

    from httpresult.foundation.errors import JsonDict
    from httpresult.io.codec import JsonCodec, JsonOptions
    from httpresult.server.response import HttpResultResponse

T = TypeVar("T")


class Result(Generic[T]):
    """Outcome container: optional value plus ordered errors.

    ``is_success`` is derived from the errors alone; ``error`` is the last error.
    Parameterizing (``Result[int]()``) records the value type, which decides
    whether values cascade in ``with_result``.

    Notes:
        - Not thread-safe; built sequentially, then treated as read-only
        - Appends remain legal indefinitely and keep accumulating
    """

    __slots__ = ("_value", "_has_value", "_errors", "__orig_class__")

    def __init__(self) -> None:
        self._value: T | None = None
        self._has_value = False
        self._errors: list[Error] = []

    # ─── Factories ───────────────────────────────────────────────────

    @classmethod
    def from_value(cls, value: T) -> Self:
        return cls().with_value(value)

    @classmethod
    def from_error(cls, error: Error | BaseException | str, code: str | None = None) -> Self:
        return cls().with_error(error, code)

    @classmethod
    def from_exception(cls, exc: BaseException) -> Self:
        return cls().with_error(exc)

    # ─── State ───────────────────────────────────────────────────────

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def has_value(self) -> bool:
        """Whether a value was stored (distinct from the value being None)."""
        return self._has_value

    @property
    def errors(self) -> tuple[Error, ...]:
        return tuple(self._errors)

    @property
    def error(self) -> Error | None:
        return self._errors[-1] if self._errors else None

    @property
    def is_success(self) -> bool:
        return not self._errors

    @property
    def is_error(self) -> bool:
        return bool(self._errors)

    @property
    def value_type(self) -> Any:
        """Type argument the result was parameterized with, or None."""
        orig = getattr(self, "__orig_class__", None)
        args = get_args(orig) if orig is not None else ()
        return args[0] if args else None

    # ─── Append Protocol ─────────────────────────────────────────────

    def append(self, update: ResultAppend) -> None:
        """Merge a partial update.

        Order: value, then errors (append or replace), then each sub-result's
        errors and value.
        """
        if update.should_append_value:
            self._value = update.value
            self._has_value = True

        if update.should_replace_errors:
            self._errors = _present(update.errors)
        elif update.should_append_errors:
            self._errors.extend(_present(update.errors))

        for result in update.results or ():
            if result is None:
                continue
            if update.should_append_result_errors:
                self._errors.extend(e.clone() for e in result._errors)
            if update.should_append_result_values and self._values_align(result):
                self._value = result._value
                self._has_value = result._has_value

    def _values_align(self, other: Result[Any]) -> bool:
        """Unparameterized results align with anything; parameterized ones must match."""
        mine, theirs = self.value_type, other.value_type
        return mine is None or theirs is None or mine == theirs

    # ─── Builders ────────────────────────────────────────────────────

    def with_value(self, value: T | None) -> Self:
        self.append(ResultAppend(value=value, should_append_value=True))
        return self

    def with_error(self, error: Error | BaseException | str | None, code: str | None = None) -> Self:
        """Normalize the input to an Error and append it.

        Accepts an Error, an exception, or a message (with optional code).
        None is ignored.
        """
        normalized = to_error(error, code)
        if normalized is not None:
            self.append(ResultAppend(errors=[normalized], should_append_errors=True))
        return self

    def with_errors(self, errors: Iterable[Error], *, replace: bool = False) -> Self:
        errors = list(errors)
        self.append(ResultAppend(errors=errors, should_append_errors=not replace, should_replace_errors=replace))
        return self

    def with_result(self, *results: Result[Any], append_values: bool = True) -> Self:
        """Cascade sub-results: errors are appended, values taken when the types align."""
        self.append(ResultAppend(
            results=results,
            should_append_result_errors=True,
            should_append_result_values=append_values,
        ))
        return self

    def success(self, other: Result[Any]) -> bool:
        """Fold ``other`` into this result and report whether it succeeded.

        Example:
            >>> outer = Result()
            >>> outer.success(Result().with_error("nope"))
            False
            >>> outer.is_error
            True
        """
        self.with_result(other)
        return not other.is_error

    def throw_if_error(self) -> None:
        """Raise the last error's exception (or a ResultError) if this is an error.

        Raises:
            BaseException: The wrapped exception of ``self.error``
            ResultError: When the error carries no exception
        """
        if self._errors:
            raise self._errors[-1].to_exception()

    # ─── Conversion ──────────────────────────────────────────────────

    def clone(self) -> Self:
        """Copy with cloned errors; the value reference is shared."""
        twin = type(self)()
        if (orig := getattr(self, "__orig_class__", None)) is not None:
            twin.__orig_class__ = orig
        twin._value = self._value
        twin._has_value = self._has_value
        twin._errors = [e.clone() for e in self._errors]
        return twin

    def to_envelope(self, options: JsonOptions | None = None, codec: JsonCodec | None = None) -> JsonDict:
        """JSON-ready envelope: value, hasValue, errors, isSuccess."""
        from httpresult.io.envelope import dump_envelope
        return dump_envelope(self, options, codec)

    def get_response(self, options: JsonOptions | None = None, codec: JsonCodec | None = None) -> HttpResultResponse:
        """ASGI response with the JSON envelope body (status 200 for a plain Result)."""
        from httpresult.server.response import HttpResultResponse
        return HttpResultResponse.create(self, options, codec)

    # ─── Dunder Methods ──────────────────────────────────────────────

    def __bool__(self) -> bool:
        """True when successful."""
        return not self._errors

    def __repr__(self) -> str:
        name = type(self).__name__
        if self._errors:
            return f"{name}(errors={self._errors!r}, value={self._value!r})"
        return f"{name}(value={self._value!r})" if self._has_value else f"{name}()"


def _present(errors: Iterable[Error | None] | None) -> list[Error]:
    return [e for e in errors or () if e is not None]


def to_error(error: Error | BaseException | str | None, code: str | None = None) -> Error | None:
    """Normalize an Error, exception or message into an Error.

    A code given with an existing Error is set on a clone; the caller's instance is untouched.
    """
    if error is None or isinstance(error, Error):
        if error is not None and code is not None:
            return error.clone().with_code(code)
        return error
    if isinstance(error, BaseException):
        return Error.from_exception(error, code=code)
    if isinstance(error, str):
        return Error(message=error, code=code)
    raise TypeError(f"Cannot convert {type(error).__name__} to Error")
