"""HTTP utilities package for the client layer.

Exposes the shared ``httpx.AsyncClient`` constructor, header helpers and the
transport invoker used by every provider facade.
"""

from .client import create_async_client
from .headers import build_request_headers, format_tags_header
from .invoker import HttpInvoker, request_id_of

__all__ = [
    "create_async_client",
    "build_request_headers",
    "format_tags_header",
    "HttpInvoker",
    "request_id_of",
]
