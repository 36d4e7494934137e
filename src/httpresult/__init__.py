"""httpresult - Result, Error and HttpResult containers for HTTP services.

Operations report outcomes as values instead of exceptions: a Result carries an
optional value plus ordered errors, an HttpResult adds a status code, response
headers and HTTP transactions. The same envelope travels over the wire, so a
server's result is rebuilt intact by the client.

Building results:
    >>> from httpresult import HttpResult, Result
    >>>
    >>> result = Result[int]().with_value(42)
    >>> result.is_success
    True
    >>> missing = HttpResult[int]().with_status_code(404)
    >>> missing.error.message
    'StatusCode: 404'

Cascading:
    >>> outer = HttpResult[int]()
    >>> if not outer.success(missing):
    ...     outer.status_code
    404

Server (starlette):
    >>> async def endpoint(request):
    ...     return HttpResult[int]().with_value(7).with_http_response_header("X-Id", "1").get_response()

Client (httpx):
    >>> from httpresult import execute
    >>> async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
    ...     result = await execute(client, "GET", "/value", value_type=int)
    ...     result.value, result.get_response_header("x-id")
    (7, ['1'])
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    CodecError,
    Error,
    ErrorCode,
    HttpError,
    InvalidRequestUriError,
    ProblemDetails,
    RequestCanceledError,
    ResultError,
    classify_exception,
)

# Config
from .foundation.config import HttpResultSettings, clear_settings_cache, get_settings

# Results
from .result import HttpResult, HttpResultAppend, Result, ResultAppend

# Serialization
from .io import JsonCodec, JsonOptions, OrjsonCodec, dump_envelope, get_codec, is_envelope

# Client
from .client import HttpTransaction, StringHttpTransaction, delete, execute, get, patch, post, put, read_transactions

# Server
from .server import HttpResultResponse

__all__ = [
    "__version__",
    # Errors
    "Error", "HttpError", "ProblemDetails", "ErrorCode", "classify_exception",
    "ResultError", "CodecError", "RequestCanceledError", "InvalidRequestUriError",
    # Config
    "HttpResultSettings", "get_settings", "clear_settings_cache",
    # Results
    "Result", "HttpResult", "ResultAppend", "HttpResultAppend",
    # Serialization
    "JsonCodec", "JsonOptions", "OrjsonCodec", "get_codec", "dump_envelope", "is_envelope",
    # Client
    "execute", "get", "post", "put", "patch", "delete",
    "HttpTransaction", "StringHttpTransaction", "read_transactions",
    # Server
    "HttpResultResponse",
]
