"""Server side: results rendered as ASGI responses.

Usage:
    >>> from httpresult.server import HttpResultResponse
    >>> async def endpoint(request):
    ...     return HttpResultResponse(Result().with_error("boom"))
"""

from .response import HttpResultResponse

__all__ = ["HttpResultResponse"]
