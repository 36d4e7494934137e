"""Error records for results.

- Error: single failure record with builder-style setters
- HttpError/ProblemDetails: status-code-bearing errors with RFC 7807 payloads
- ErrorCode/classify_exception: codes for faults captured by the execute pipeline
- ResultError/CodecError/RequestCanceledError/InvalidRequestUriError: exceptions
"""

from .errors import Error, ErrorCode, classify_exception
from .exceptions import CodecError, InvalidRequestUriError, RequestCanceledError, ResultError
from .http import HttpError, is_success_status, status_name
from .problem import ProblemDetails, status_of
from .types import JsonDict, JsonPrimitive, JsonValue

__all__ = [
    # Core errors
    "Error", "ErrorCode", "classify_exception",
    # HTTP errors
    "HttpError", "ProblemDetails", "is_success_status", "status_name", "status_of",
    # Exceptions
    "ResultError", "CodecError", "RequestCanceledError", "InvalidRequestUriError",
    # JSON aliases
    "JsonDict", "JsonPrimitive", "JsonValue",
]
