"""Targets toolset – monitored hosts and objects."""

from __future__ import annotations

from mcp.types import CallToolResult
from pydantic import Field

from n9e_mcp.api.common import fetch, invalid_input, positive, query_params, read_tool
from n9e_mcp.client import GetClientFunc, RequestContext
from n9e_mcp.schemas import PageResp, Target
from n9e_mcp.toolset import ServerTool, ToolInput, ToolRequest, Toolset, ToolsetGroup
from n9e_mcp.toolset.validate import validate_pagination


class ListTargetsInput(ToolInput):
    gids: str = Field("", description="Business group IDs comma-separated")
    query: str = Field("", description="Search keyword (matches ident/tags)")
    limit: int = Field(0, description="Page size (default 20)")
    p: int = Field(0, description="Page number (starts from 1)")
    downtime: int = Field(0, description="Filter by downtime in seconds (targets not reporting for this duration)")
    datasource_ids: str = Field("", description="Datasource IDs comma-separated")


def list_targets_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListTargetsInput) -> CallToolResult:
        err = validate_pagination(inp.limit, inp.p)
        if err:
            return invalid_input(err)

        params = query_params(
            gids=inp.gids,
            query=inp.query,
            limit=positive(inp.limit),
            p=positive(inp.p),
            downtime=positive(inp.downtime),
            datasource_ids=inp.datasource_ids,
        )
        return await fetch(get_client, ctx, "/api/n9e/targets", PageResp[Target], params)

    return read_tool(
        "list_targets",
        "List Targets",
        "List monitored targets/hosts with optional filters",
        ListTargetsInput,
        handler,
    )


def register_targets_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("targets", "Target/Host management tools for viewing monitored objects")
    ts.add_read_tools(list_targets_tool(get_client))
    group.add_toolset(ts)
