"""Alerts toolset – active/history alert events and alert rules."""

from __future__ import annotations

from typing import List

from mcp.types import CallToolResult
from pydantic import Field

from n9e_mcp.api.common import fetch, invalid_input, positive, query_params, read_tool, require_positive
from n9e_mcp.client import GetClientFunc, RequestContext
from n9e_mcp.schemas import AlertCurEvent, AlertHisEvent, AlertRule, PageResp
from n9e_mcp.toolset import ServerTool, ToolInput, ToolRequest, Toolset, ToolsetGroup, new_tool_result_error
from n9e_mcp.toolset.validate import (
    first_error,
    validate_cate,
    validate_is_recovered,
    validate_pagination,
    validate_rule_prods,
    validate_severity,
    validate_time_range,
)

# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class ListActiveAlertsInput(ToolInput):
    hours: int = Field(0, description="Lookback hours (mutually exclusive with stime/etime)")
    stime: int = Field(0, description="Start time Unix timestamp")
    etime: int = Field(0, description="End time Unix timestamp")
    severity: str = Field("", description="Severity levels comma-separated (1=critical, 2=warning, 3=info)")
    query: str = Field("", description="Search keyword (matches rule name/tags)")
    cate: str = Field("", description="Alert category (prometheus/host/elasticsearch, default $all)")
    rule_prods: str = Field("", description="Product types comma-separated (host/metric/loki/anomaly)")
    datasource_ids: str = Field("", description="Datasource IDs comma-separated")
    rid: int = Field(0, description="Alert rule ID")
    bgid: int = Field(0, description="Business group ID")
    limit: int = Field(0, description="Page size (default 20)")
    p: int = Field(0, description="Page number (starts from 1)")


class ListHistoryAlertsInput(ToolInput):
    hours: int = Field(0, description="Lookback hours")
    stime: int = Field(0, description="Start time Unix timestamp")
    etime: int = Field(0, description="End time Unix timestamp")
    severity: int = Field(0, description="Severity level (-1=all, 1=critical, 2=warning, 3=info)")
    is_recovered: int = Field(0, description="Recovery status (-1=all, 0=not recovered, 1=recovered)")
    query: str = Field("", description="Search keyword")
    cate: str = Field("", description="Alert category")
    rule_prods: str = Field("", description="Product types comma-separated")
    datasource_ids: str = Field("", description="Datasource IDs comma-separated")
    bgid: int = Field(0, description="Business group ID")
    limit: int = Field(0, description="Page size (default 20)")
    p: int = Field(0, description="Page number (starts from 1)")


class GetAlertInput(ToolInput):
    required_fields = ("eid",)

    eid: int = Field(0, description="Alert event ID")


class ListAlertRulesInput(ToolInput):
    required_fields = ("group_id",)

    group_id: int = Field(0, description="Business group ID")


class GetAlertRuleInput(ToolInput):
    required_fields = ("arid",)

    arid: int = Field(0, description="Alert rule ID")


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


def list_active_alerts_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListActiveAlertsInput) -> CallToolResult:
        err = first_error(
            validate_time_range(inp.hours, inp.stime, inp.etime),
            validate_severity(inp.severity),
            validate_pagination(inp.limit, inp.p),
            validate_cate(inp.cate),
            validate_rule_prods(inp.rule_prods),
        )
        if err:
            return invalid_input(err)

        params = query_params(
            hours=positive(inp.hours),
            stime=positive(inp.stime),
            etime=positive(inp.etime),
            severity=inp.severity,
            query=inp.query,
            cate=inp.cate,
            rule_prods=inp.rule_prods,
            datasource_ids=inp.datasource_ids,
            rid=positive(inp.rid),
            bgid=positive(inp.bgid),
            limit=positive(inp.limit),
            p=positive(inp.p),
        )
        return await fetch(
            get_client, ctx, "/api/n9e/alert-cur-events/list", PageResp[AlertCurEvent], params
        )

    return read_tool(
        "list_active_alerts",
        "List Active Alerts",
        "List active alert events with optional filters. Use this to view currently firing alerts.",
        ListActiveAlertsInput,
        handler,
    )


def get_active_alert_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetAlertInput) -> CallToolResult:
        err = require_positive("eid", inp.eid)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/alert-cur-event/{inp.eid}", AlertCurEvent)

    return read_tool(
        "get_active_alert",
        "Get Active Alert",
        "Get details of a specific active alert event by ID",
        GetAlertInput,
        handler,
    )


def list_history_alerts_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListHistoryAlertsInput) -> CallToolResult:
        # -1 means "all severities"; only concrete levels are checked
        err = first_error(
            validate_time_range(inp.hours, inp.stime, inp.etime),
            validate_severity(str(inp.severity)) if inp.severity > 0 else None,
            validate_is_recovered(inp.is_recovered),
            validate_pagination(inp.limit, inp.p),
            validate_cate(inp.cate),
            validate_rule_prods(inp.rule_prods),
        )
        if err:
            return invalid_input(err)

        params = query_params(
            hours=positive(inp.hours),
            stime=positive(inp.stime),
            etime=positive(inp.etime),
            severity=inp.severity,
            is_recovered=inp.is_recovered,
            query=inp.query,
            cate=inp.cate,
            rule_prods=inp.rule_prods,
            datasource_ids=inp.datasource_ids,
            bgid=positive(inp.bgid),
            limit=positive(inp.limit),
            p=positive(inp.p),
        )
        return await fetch(
            get_client, ctx, "/api/n9e/alert-his-events/list", PageResp[AlertHisEvent], params
        )

    return read_tool(
        "list_history_alerts",
        "List History Alerts",
        "List historical alert events with optional filters",
        ListHistoryAlertsInput,
        handler,
    )


def get_history_alert_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetAlertInput) -> CallToolResult:
        err = require_positive("eid", inp.eid)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/alert-his-event/{inp.eid}", AlertHisEvent)

    return read_tool(
        "get_history_alert",
        "Get History Alert",
        "Get details of a specific historical alert event by ID",
        GetAlertInput,
        handler,
    )


def list_alert_rules_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListAlertRulesInput) -> CallToolResult:
        err = require_positive("group_id", inp.group_id)
        if err:
            return new_tool_result_error(err)
        return await fetch(
            get_client, ctx, f"/api/n9e/busi-group/{inp.group_id}/alert-rules", List[AlertRule]
        )

    return read_tool(
        "list_alert_rules",
        "List Alert Rules",
        "List alert rules for a business group",
        ListAlertRulesInput,
        handler,
    )


def get_alert_rule_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetAlertRuleInput) -> CallToolResult:
        err = require_positive("arid", inp.arid)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/alert-rule/{inp.arid}", AlertRule)

    return read_tool(
        "get_alert_rule",
        "Get Alert Rule",
        "Get details of a specific alert rule by ID",
        GetAlertRuleInput,
        handler,
    )


def register_alerts_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("alerts", "Alert management tools for viewing and managing alerts")
    ts.add_read_tools(
        list_active_alerts_tool(get_client),
        get_active_alert_tool(get_client),
        list_history_alerts_tool(get_client),
        get_history_alert_tool(get_client),
        list_alert_rules_tool(get_client),
        get_alert_rule_tool(get_client),
    )
    group.add_toolset(ts)
