"""Records of completed HTTP exchanges and their text snapshots."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx


@dataclass(frozen=True, slots=True)
class HttpTransaction:
    """One request/response exchange.

    ``response`` is None when the request never completed; ``status_code`` is
    the last known status at that point.
    """

    request: httpx.Request | None
    response: httpx.Response | None
    status_code: int | None

    @property
    def request_url(self) -> str | None:
        return str(self.request.url) if self.request is not None else None

    async def read_request_text(self) -> str | None:
        """Request body as text, None when there is no body."""
        if self.request is None:
            return None
        body = await self.request.aread()
        return body.decode("utf-8", errors="replace") if body else None

    async def read_response_text(self) -> str | None:
        """Response body as text, None when no response was received."""
        if self.response is None:
            return None
        await self.response.aread()
        return self.response.text


@dataclass(frozen=True, slots=True)
class StringHttpTransaction:
    """Text snapshot of an HttpTransaction."""

    request_url: str | None
    request_text: str | None
    response_text: str | None
    status_code: int | None


async def _snapshot(transaction: HttpTransaction) -> StringHttpTransaction:
    request_text, response_text = await asyncio.gather(
        transaction.read_request_text(),
        transaction.read_response_text(),
    )
    return StringHttpTransaction(
        request_url=transaction.request_url,
        request_text=request_text,
        response_text=response_text,
        status_code=transaction.status_code,
    )


async def read_transactions(transactions: Iterable[HttpTransaction]) -> list[StringHttpTransaction]:
    """Read every transaction's bodies concurrently.

    The returned list matches the input order regardless of completion order.
    """
    return list(await asyncio.gather(*(_snapshot(t) for t in transactions)))
