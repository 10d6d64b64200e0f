"""Nightingale API client, its errors and the per-request context."""

from n9e_mcp.client.client import N9eClient, RawResponse
from n9e_mcp.client.context import (
    GetClientFunc,
    RequestContext,
    client_from_context,
    context_with_client,
    default_get_client,
    must_client_from_context,
)
from n9e_mcp.client.errors import (
    APIError,
    DecodeError,
    N9eError,
    RequestCanceledError,
    RequestTimeoutError,
    RetriesExhaustedError,
    TransportError,
    get_api_error,
    is_api_error,
)

__all__ = [
    "N9eClient",
    "RawResponse",
    "GetClientFunc",
    "RequestContext",
    "client_from_context",
    "context_with_client",
    "default_get_client",
    "must_client_from_context",
    "APIError",
    "DecodeError",
    "N9eError",
    "RequestCanceledError",
    "RequestTimeoutError",
    "RetriesExhaustedError",
    "TransportError",
    "get_api_error",
    "is_api_error",
]
