"""Serialization: JSON codec and the result envelope.

Usage:
    >>> from httpresult.io import dump_envelope, get_codec
    >>> from httpresult import HttpResult
    >>> get_codec().serialize(dump_envelope(HttpResult().with_value(1)))
    '{"value":1,"hasValue":true,"errors":[],"isSuccess":true,"statusCode":200}'
"""

from .codec import JsonCodec, JsonOptions, OrjsonCodec, get_codec, snippet
from .envelope import apply_envelope, dump_envelope, dump_error, is_envelope, load_error, load_errors

__all__ = [
    # Codec
    "JsonCodec", "JsonOptions", "OrjsonCodec", "get_codec", "snippet",
    # Envelope
    "dump_envelope", "dump_error", "is_envelope", "load_error", "load_errors", "apply_envelope",
]
