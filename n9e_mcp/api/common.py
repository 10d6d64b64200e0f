"""Helpers shared by the tool modules."""

from __future__ import annotations

from typing import Any

from mcp.types import CallToolResult, Tool, ToolAnnotations

from n9e_mcp.client import GetClientFunc, N9eError, RequestContext
from n9e_mcp.toolset import ServerTool, ToolInput, make_tool_handler, marshal_result, new_tool_result_error

NO_CLIENT = "failed to get n9e client from context"


def read_tool(name: str, title: str, description: str, input_model: type[ToolInput], handler: Any) -> ServerTool:
    return ServerTool(
        tool=Tool(
            name=name,
            description=description,
            inputSchema=input_model.input_schema(),
            annotations=ToolAnnotations(title=title, readOnlyHint=True),
        ),
        handler=make_tool_handler(input_model, handler),
    )


def write_tool(name: str, title: str, description: str, input_model: type[ToolInput], handler: Any) -> ServerTool:
    return ServerTool(
        tool=Tool(
            name=name,
            description=description,
            inputSchema=input_model.input_schema(),
            annotations=ToolAnnotations(title=title, readOnlyHint=False, destructiveHint=False),
        ),
        handler=make_tool_handler(input_model, handler),
    )


def require_positive(field: str, value: int) -> str | None:
    if value <= 0:
        return f"{field} is required and must be positive"
    return None


def invalid_input(message: str) -> CallToolResult:
    return new_tool_result_error(f"invalid input: {message}")


def positive(value: int) -> int | None:
    return value if value > 0 else None


def query_params(**values: Any) -> dict[str, str]:
    """Build a query string table, dropping unset (``None``, ``""``, ``0``) values."""
    return {k: str(v) for k, v in values.items() if v is not None and v != "" and v != 0}


async def fetch(
    get_client: GetClientFunc,
    ctx: RequestContext,
    path: str,
    shape: Any,
    params: dict[str, str] | None = None,
) -> CallToolResult:
    """GET *path*, decode as *shape* and render the payload as a tool result."""
    client = get_client(ctx)
    if client is None:
        return new_tool_result_error(NO_CLIENT)
    try:
        result = await client.get(path, shape, params, ctx=ctx)
    except N9eError as exc:
        return new_tool_result_error(str(exc))
    return marshal_result(result)
