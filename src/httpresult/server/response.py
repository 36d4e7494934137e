"""ASGI response for results.

Turns a Result or HttpResult into a starlette Response: the status line comes
from the result's status code, headers set on the result are emitted (repeated
lines for multi-value headers), and the body is the JSON envelope.

Example:
    >>> from starlette.routing import Route
    >>> async def weather(request):
    ...     return HttpResult[list[Forecast]]().with_value(forecasts).get_response()
    >>> routes = [Route("/resultweather", weather)]
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from starlette.responses import Response

from httpresult.io import JsonOptions, dump_envelope, get_codec
from httpresult.result import HttpResult, Result

if TYPE_CHECKING:
    from httpresult.io import JsonCodec

logger = logging.getLogger("httpresult.server")

# Computed by starlette from the rendered body
_MANAGED_HEADERS = frozenset({"content-length"})


class HttpResultResponse(Response):
    """Response rendered from a result at construction time.

    The body is a snapshot: later changes to the result are not reflected, and
    rendering never mutates the result.
    """

    media_type = "application/json"

    def __init__(
        self,
        result: Result[Any],
        options: JsonOptions | None = None,
        codec: JsonCodec | None = None,
    ) -> None:
        opts = options or JsonOptions.default()
        codec = codec or get_codec()
        status = result.status_code if isinstance(result, HttpResult) else int(HTTPStatus.OK)
        super().__init__(content=codec.serialize(dump_envelope(result, opts, codec), opts), status_code=status)
        self.result = result

        if isinstance(result, HttpResult):
            for name, values in result.response_headers.items():
                if name.lower() in _MANAGED_HEADERS:
                    continue
                if name.lower() == "content-type":
                    self.headers[name] = values[-1] if values else self.media_type
                    continue
                for value in values:
                    self.headers.append(name, value)
        logger.debug(f"Rendered {type(result).__name__} -> {status} ({len(self.body)} bytes)")

    @classmethod
    def create(
        cls,
        result: Result[Any],
        options: JsonOptions | None = None,
        codec: JsonCodec | None = None,
    ) -> HttpResultResponse:
        return cls(result, options, codec)
