"""Execute pipeline: one HTTP call, one populated HttpResult, never an exception.

Steps:
    1. Build the request; string, bytes and stream bodies are buffered fully,
       typed values are JSON-encoded through the codec
    2. Send it (a cancel event aborts the in-flight send)
    3. Record status, response headers and the transaction
    4. Parse the body as JSON; a parse failure is not fatal yet
    5. An envelope body (``{value, hasValue, errors, isSuccess, statusCode}``) is
       unpacked into the result
    6. Otherwise a 2xx body is read as the requested type and a non-2xx status
       becomes an HttpError (using problem details from the body when present)
    7. Any fault in 1-6 is captured as an Error on the result

Example:
    >>> async with httpx.AsyncClient(base_url="https://api.example.com") as client:
    ...     result = await execute(client, "GET", "/resultweather", value_type=list[Forecast])
    ...     if result.is_success:
    ...         print(result.value)
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from http import HTTPStatus
from typing import IO, TYPE_CHECKING, Any, TypeVar

import httpx

from httpresult.foundation.config import get_settings
from httpresult.foundation.errors import (
    CodecError,
    Error,
    HttpError,
    InvalidRequestUriError,
    ProblemDetails,
    RequestCanceledError,
    classify_exception,
    is_success_status,
    status_of,
)
from httpresult.io import JsonOptions, apply_envelope, get_codec, is_envelope
from httpresult.result import HttpResult, HttpResultAppend

from .transaction import HttpTransaction

if TYPE_CHECKING:
    from collections.abc import Awaitable, Mapping

    from httpresult.io import JsonCodec

T = TypeVar("T")

logger = logging.getLogger("httpresult.client")

_UNSET: Any = object()

Content = str | bytes | IO[bytes] | IO[str]


# ─────────────────────────────────────────────────────────────────────────────
# Request Building
# ─────────────────────────────────────────────────────────────────────────────


def _buffer(content: Content) -> bytes:
    """Read a body fully; streams are rewound first."""
    if isinstance(content, bytes):
        return content
    if isinstance(content, str):
        return content.encode("utf-8")
    if content.seekable():
        content.seek(0)
    data = content.read()
    return data.encode("utf-8") if isinstance(data, str) else data


def build_request(
    client: httpx.AsyncClient,
    method: str,
    uri: str | httpx.URL,
    *,
    content: Content | None = None,
    value: Any = _UNSET,
    headers: Mapping[str, str] | None = None,
    options: JsonOptions,
    codec: JsonCodec,
) -> httpx.Request:
    """Build the request, resolving relative URIs against the client's base URL.

    Raises:
        InvalidRequestUriError: If the URI is relative and the client has no base URL
    """
    url = httpx.URL(uri)
    if not url.is_absolute_url and not client.base_url.is_absolute_url:
        raise InvalidRequestUriError(f"Request URI '{uri}' is relative and the client has no base address")

    merged = {"User-Agent": get_settings().client.user_agent, **(headers or {})}
    body: bytes | None = None
    if value is not _UNSET:
        body = codec.serialize(value, options).encode("utf-8")
    elif content is not None:
        body = _buffer(content)
    if body is not None and not any(k.lower() == "content-type" for k in merged):
        merged["Content-Type"] = f"{codec.content_type}; charset=utf-8"

    return client.build_request(method.upper(), url, content=body, headers=merged)


# ─────────────────────────────────────────────────────────────────────────────
# Cancellation
# ─────────────────────────────────────────────────────────────────────────────


async def _guard(awaitable: Awaitable[T], cancel: asyncio.Event | None) -> T:
    """Await ``awaitable`` unless ``cancel`` is set first.

    Raises:
        RequestCanceledError: If the event is set before the awaitable finishes
    """
    if cancel is None:
        return await awaitable
    task = asyncio.ensure_future(awaitable)
    if cancel.is_set():
        task.cancel()
        raise RequestCanceledError("Request canceled before it was sent")
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()
    if task in done:
        return task.result()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    raise RequestCanceledError("Request canceled while in flight")


# ─────────────────────────────────────────────────────────────────────────────
# Response Handling
# ─────────────────────────────────────────────────────────────────────────────


def _response_headers(response: httpx.Response) -> dict[str, list[str]]:
    """Group raw response headers by name, keeping wire casing and order."""
    grouped: dict[str, list[str]] = {}
    keys: dict[str, str] = {}
    encoding = response.headers.encoding
    for raw_key, raw_value in response.headers.raw:
        name = raw_key.decode(encoding)
        key = keys.setdefault(name.lower(), name)
        grouped.setdefault(key, []).append(raw_value.decode(encoding))
    return grouped


def _parse(text: str, codec: JsonCodec) -> tuple[bool, Any]:
    """Try to parse JSON; returns (parsed, document)."""
    if not text.strip():
        return False, None
    try:
        return True, codec.loads(text)
    except CodecError:
        return False, None


def _read_value(text: str, parsed: bool, document: Any, value_type: Any, codec: JsonCodec) -> Any:
    """Read a non-envelope 2xx body as ``value_type``.

    Non-JSON bodies are valid when the type accepts the raw text.
    """
    if parsed:
        return codec.validate(document, value_type)
    if value_type is str:
        return text
    return codec.validate(text, value_type)


def _protocol_error(document: Any, status: int) -> HttpError | None:
    """HttpError from a problem-details body, None when the body is something else."""
    if isinstance(document, dict) and status_of(document):
        problem = ProblemDetails.from_wire(document)
        if problem is not None:
            return HttpError().set_status_code(status, problem, message=problem.title)
    return None


def _fault(exc: BaseException) -> Error:
    code = classify_exception(exc)
    logger.warning(f"Request failed ({code}): {exc}")
    return Error.from_exception(exc, code=code.value)


# ─────────────────────────────────────────────────────────────────────────────
# Execute
# ─────────────────────────────────────────────────────────────────────────────


async def execute(
    client: httpx.AsyncClient,
    method: str,
    uri: str | httpx.URL,
    *,
    content: Content | None = None,
    value: Any = _UNSET,
    value_type: Any = None,
    headers: Mapping[str, str] | None = None,
    options: JsonOptions | None = None,
    codec: JsonCodec | None = None,
    cancel: asyncio.Event | None = None,
) -> HttpResult[Any]:
    """Send one request and capture its outcome.

    Args:
        client: httpx client (its base_url resolves relative URIs)
        method: HTTP method
        uri: Absolute URI, or relative to the client's base_url
        content: Raw body (string, bytes or stream)
        value: Object sent as the JSON body (takes precedence over content)
        value_type: Type to read the response value as; None keeps raw JSON
            from envelopes and ignores plain bodies
        headers: Extra request headers
        options: Codec options (defaults from settings)
        codec: JSON codec (orjson by default)
        cancel: Event that aborts the request when set

    Returns:
        HttpResult parameterized with ``value_type``. Faults never propagate;
        they are appended as errors with the last known status (200 if no
        response arrived).
    """
    opts = options or JsonOptions.default()
    codec = codec or get_codec()
    result: HttpResult[Any] = HttpResult[value_type]() if value_type is not None else HttpResult()

    status = int(HTTPStatus.OK)
    request: httpx.Request | None = None
    response: httpx.Response | None = None
    try:
        request = build_request(client, method, uri, content=content, value=value,
                                headers=headers, options=opts, codec=codec)
        logger.debug(f"{request.method} {request.url}")
        response = await _guard(client.send(request), cancel)
        status = response.status_code
        logger.debug(f"{request.method} {request.url} -> {status}")

        result.append(HttpResultAppend(
            response_headers=_response_headers(response), should_append_headers=True,
            transactions=[HttpTransaction(request, response, status)], should_append_transactions=True,
        ))

        text = response.text
        parsed, document = _parse(text, codec)
        if parsed and is_envelope(document, opts):
            apply_envelope(result, document, value_type=value_type, transport_status=status,
                           options=opts, codec=codec)
        elif not is_success_status(status):
            problem = _protocol_error(document if parsed else None, status)
            result.append(HttpResultAppend(
                errors=[problem] if problem else None, should_append_errors=problem is not None,
                status_code=status, should_append_status_code_or_error=True,
            ))
        elif value_type is not None:
            result.append(HttpResultAppend(
                value=_read_value(text, parsed, document, value_type, codec), should_append_value=True,
                status_code=status, should_append_status_code=True,
            ))
        else:
            result.append(HttpResultAppend(status_code=status, should_append_status_code=True))
    except Exception as exc:
        update = HttpResultAppend(
            errors=[_fault(exc)], should_append_errors=True,
            status_code=status, should_append_status_code=True,
        )
        if request is not None and response is None:
            update.transactions = [HttpTransaction(request, None, status)]
            update.should_append_transactions = True
        result.append(update)
    return result


# ─────────────────────────────────────────────────────────────────────────────
# Method Shortcuts
# ─────────────────────────────────────────────────────────────────────────────


async def get(client: httpx.AsyncClient, uri: str | httpx.URL, **kwargs: Any) -> HttpResult[Any]:
    return await execute(client, "GET", uri, **kwargs)


async def post(client: httpx.AsyncClient, uri: str | httpx.URL, **kwargs: Any) -> HttpResult[Any]:
    return await execute(client, "POST", uri, **kwargs)


async def put(client: httpx.AsyncClient, uri: str | httpx.URL, **kwargs: Any) -> HttpResult[Any]:
    return await execute(client, "PUT", uri, **kwargs)


async def patch(client: httpx.AsyncClient, uri: str | httpx.URL, **kwargs: Any) -> HttpResult[Any]:
    return await execute(client, "PATCH", uri, **kwargs)


async def delete(client: httpx.AsyncClient, uri: str | httpx.URL, **kwargs: Any) -> HttpResult[Any]:
    return await execute(client, "DELETE", uri, **kwargs)
