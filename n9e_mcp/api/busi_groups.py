"""Business groups toolset."""

from __future__ import annotations

from typing import List

from mcp.types import CallToolResult

from n9e_mcp.api.common import fetch, read_tool
from n9e_mcp.client import GetClientFunc, RequestContext
from n9e_mcp.schemas import BusiGroup
from n9e_mcp.toolset import ServerTool, ToolInput, ToolRequest, Toolset, ToolsetGroup


class ListBusiGroupsInput(ToolInput):
    pass


def list_busi_groups_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListBusiGroupsInput) -> CallToolResult:
        return await fetch(get_client, ctx, "/api/n9e/busi-groups", List[BusiGroup])

    return read_tool(
        "list_busi_groups",
        "List Business Groups",
        "List all business groups that the current user has access to",
        ListBusiGroupsInput,
        handler,
    )


def register_busi_groups_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("busi_groups", "Business group management tools")
    ts.add_read_tools(list_busi_groups_tool(get_client))
    group.add_toolset(ts)
