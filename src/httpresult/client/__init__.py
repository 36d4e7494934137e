"""HTTP client side: the execute pipeline and transaction records.

Usage:
    >>> import httpx
    >>> from httpresult.client import get
    >>> async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
    ...     result = await get(client, "/resultweather", value_type=list[dict])
"""

from .execute import build_request, delete, execute, get, patch, post, put
from .transaction import HttpTransaction, StringHttpTransaction, read_transactions

__all__ = [
    # Pipeline
    "execute", "build_request", "get", "post", "put", "patch", "delete",
    # Transactions
    "HttpTransaction", "StringHttpTransaction", "read_transactions",
]
