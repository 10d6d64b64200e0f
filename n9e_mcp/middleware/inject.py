"""Per-invocation client injection."""

from __future__ import annotations

from typing import Callable

from n9e_mcp.client import N9eClient, RequestContext, context_with_client
from n9e_mcp.toolset import ToolHandler, ToolRequest

ToolMiddleware = Callable[[ToolHandler], ToolHandler]


def inject_client(client: N9eClient) -> ToolMiddleware:
    """Attach *client* to the context of every tool invocation.

    Usage:
        server.add_middleware(inject_client(client))
    """

    def middleware(next_handler: ToolHandler) -> ToolHandler:
        async def handler(ctx: RequestContext, request: ToolRequest):
            return await next_handler(context_with_client(ctx, client), request)

        return handler

    return middleware
