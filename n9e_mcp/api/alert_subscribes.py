"""Alert subscriptions toolset."""

from __future__ import annotations

from typing import List

from mcp.types import CallToolResult
from pydantic import Field

from n9e_mcp.api.common import fetch, query_params, read_tool, require_positive
from n9e_mcp.client import GetClientFunc, RequestContext
from n9e_mcp.schemas import AlertSubscribe
from n9e_mcp.toolset import ServerTool, ToolInput, ToolRequest, Toolset, ToolsetGroup, new_tool_result_error


class ListAlertSubscribesInput(ToolInput):
    required_fields = ("group_id",)

    group_id: int = Field(0, description="Business group ID")


class ListAlertSubscribesByGidsInput(ToolInput):
    gids: str = Field("", description="Business group IDs comma-separated (empty for all accessible groups)")


class GetAlertSubscribeInput(ToolInput):
    required_fields = ("sid",)

    sid: int = Field(0, description="Alert subscription ID")


def list_alert_subscribes_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListAlertSubscribesInput) -> CallToolResult:
        err = require_positive("group_id", inp.group_id)
        if err:
            return new_tool_result_error(err)
        return await fetch(
            get_client, ctx, f"/api/n9e/busi-group/{inp.group_id}/alert-subscribes", List[AlertSubscribe]
        )

    return read_tool(
        "list_alert_subscribes",
        "List Alert Subscriptions",
        "List alert subscriptions for a business group",
        ListAlertSubscribesInput,
        handler,
    )


def list_alert_subscribes_by_gids_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(
        ctx: RequestContext, request: ToolRequest, inp: ListAlertSubscribesByGidsInput
    ) -> CallToolResult:
        return await fetch(
            get_client,
            ctx,
            "/api/n9e/busi-groups/alert-subscribes",
            List[AlertSubscribe],
            query_params(gids=inp.gids),
        )

    return read_tool(
        "list_alert_subscribes_by_gids",
        "List Alert Subscriptions By Group IDs",
        "List alert subscriptions across multiple business groups",
        ListAlertSubscribesByGidsInput,
        handler,
    )


def get_alert_subscribe_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetAlertSubscribeInput) -> CallToolResult:
        err = require_positive("sid", inp.sid)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/alert-subscribe/{inp.sid}", AlertSubscribe)

    return read_tool(
        "get_alert_subscribe",
        "Get Alert Subscription",
        "Get details of a specific alert subscription by ID",
        GetAlertSubscribeInput,
        handler,
    )


def register_alert_subscribes_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("alert_subscribes", "Alert subscription management tools for event handling")
    ts.add_read_tools(
        list_alert_subscribes_tool(get_client),
        list_alert_subscribes_by_gids_tool(get_client),
        get_alert_subscribe_tool(get_client),
    )
    group.add_toolset(ts)
