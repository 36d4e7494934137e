"""Result containers and the append protocol.

- Result: optional value plus ordered errors, mutated through append/with_*
- HttpResult: adds status code, response headers and HTTP transactions
- ResultAppend/HttpResultAppend: partial-update descriptors
"""

from .append import HttpResultAppend, ResultAppend
from .http import HttpMeta, HttpResult, implied_status
from .result import Result, to_error

__all__ = [
    "Result", "HttpResult", "HttpMeta",
    "ResultAppend", "HttpResultAppend",
    "implied_status", "to_error",
]
