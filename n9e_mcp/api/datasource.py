"""Datasource toolset."""

from __future__ import annotations

from typing import List

from mcp.types import CallToolResult

from n9e_mcp.api.common import fetch, read_tool
from n9e_mcp.client import GetClientFunc, RequestContext
from n9e_mcp.schemas import Datasource
from n9e_mcp.toolset import ServerTool, ToolInput, ToolRequest, Toolset, ToolsetGroup


class ListDatasourcesInput(ToolInput):
    pass


def list_datasources_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListDatasourcesInput) -> CallToolResult:
        return await fetch(get_client, ctx, "/api/n9e/datasource/brief", List[Datasource])

    return read_tool(
        "list_datasources",
        "List Datasources",
        "List all available datasources",
        ListDatasourcesInput,
        handler,
    )


def register_datasource_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("datasource", "Datasource management tools")
    ts.add_read_tools(list_datasources_tool(get_client))
    group.add_toolset(ts)
