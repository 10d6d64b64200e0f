"""Notification rules toolset."""

from __future__ import annotations

from typing import List

from mcp.types import CallToolResult
from pydantic import Field

from n9e_mcp.api.common import fetch, read_tool, require_positive
from n9e_mcp.client import GetClientFunc, RequestContext
from n9e_mcp.schemas import NotifyRule
from n9e_mcp.toolset import ServerTool, ToolInput, ToolRequest, Toolset, ToolsetGroup, new_tool_result_error


class ListNotifyRulesInput(ToolInput):
    pass


class GetNotifyRuleInput(ToolInput):
    required_fields = ("id",)

    id: int = Field(0, description="Notification rule ID")


def list_notify_rules_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListNotifyRulesInput) -> CallToolResult:
        return await fetch(get_client, ctx, "/api/n9e/notify-rules", List[NotifyRule])

    return read_tool(
        "list_notify_rules",
        "List Notification Rules",
        "List all notification rules that the current user has access to",
        ListNotifyRulesInput,
        handler,
    )


def get_notify_rule_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetNotifyRuleInput) -> CallToolResult:
        err = require_positive("id", inp.id)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/notify-rule/{inp.id}", NotifyRule)

    return read_tool(
        "get_notify_rule",
        "Get Notification Rule",
        "Get details of a specific notification rule by ID",
        GetNotifyRuleInput,
        handler,
    )


def register_notify_rules_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("notify_rules", "Notification rule management tools")
    ts.add_read_tools(
        list_notify_rules_tool(get_client),
        get_notify_rule_tool(get_client),
    )
    group.add_toolset(ts)
