"""Mutes toolset – alert silences, including the two write tools."""

from __future__ import annotations

from typing import Any, List

from mcp.types import CallToolResult
from pydantic import Field

from n9e_mcp.api.common import NO_CLIENT, fetch, read_tool, require_positive, write_tool
from n9e_mcp.client import GetClientFunc, N9eError, RequestContext
from n9e_mcp.schemas import AlertMute, PeriodicMute, TagFilter
from n9e_mcp.toolset import (
    ServerTool,
    ToolInput,
    ToolRequest,
    Toolset,
    ToolsetGroup,
    marshal_result,
    new_tool_result_error,
)

MUTE_TIME_RANGE = 0
MUTE_PERIODIC = 1


class ListMutesInput(ToolInput):
    required_fields = ("group_id",)

    group_id: int = Field(0, description="Business group ID")


class GetMuteInput(ToolInput):
    required_fields = ("group_id", "mute_id")

    group_id: int = Field(0, description="Business group ID")
    mute_id: int = Field(0, description="Alert mute ID")


class MuteBody(ToolInput):
    """Fields shared by create and update."""

    group_id: int = Field(0, description="Business group ID")
    note: str = Field("", description="Note/title for the mute rule")
    cate: str = Field("", description="Category (e.g., prometheus, host, elasticsearch)")
    prod: str = Field("", description="Product type (e.g., metric, host, loki)")
    datasource_ids: List[int] = Field(
        default_factory=list, description="Datasource IDs to match (empty means all)"
    )
    cluster: str = Field("", description="Cluster name filter")
    tags: List[TagFilter] = Field(
        default_factory=list,
        description="Tag filters. Each filter has key, func (==, !=, in, not in, =~, !~), and value",
    )
    cause: str = Field("", description="Reason/description for the mute")
    btime: int = Field(0, description="Start time Unix timestamp")
    etime: int = Field(0, description="End time Unix timestamp")
    severities: List[int] = Field(
        default_factory=list,
        description="Severity levels to match (1=critical, 2=warning, 3=info). Empty means all.",
    )
    disabled: int = Field(0, description="Disabled status (0=enabled, 1=disabled)")
    mute_time_type: int = Field(MUTE_TIME_RANGE, description="Mute time type (0=time range, 1=periodic)")
    periodic_mutes: List[PeriodicMute] = Field(
        default_factory=list, description="Periodic mute rules (when mute_time_type=1)"
    )

    def check(self) -> str | None:
        if not self.cause:
            return "cause is required"
        # periodic rules carry their own windows and are forwarded as given
        if self.mute_time_type == MUTE_TIME_RANGE:
            if self.btime <= 0 or self.etime <= 0:
                return "btime and etime are required for time range mode"
            if self.btime >= self.etime:
                return "btime must be less than etime"
        return None

    def request_body(self) -> dict[str, Any]:
        return self.model_dump(exclude={"group_id", "mute_id"}, by_alias=True)


class CreateMuteInput(MuteBody):
    required_fields = ("group_id", "cause", "btime", "etime")


class UpdateMuteInput(MuteBody):
    required_fields = ("group_id", "mute_id", "cause", "btime", "etime")

    mute_id: int = Field(0, description="Alert mute ID to update")


def list_mutes_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListMutesInput) -> CallToolResult:
        err = require_positive("group_id", inp.group_id)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/busi-group/{inp.group_id}/alert-mutes", List[AlertMute])

    return read_tool(
        "list_mutes",
        "List Alert Mutes",
        "List alert mutes/silences for a business group",
        ListMutesInput,
        handler,
    )


def get_mute_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetMuteInput) -> CallToolResult:
        err = require_positive("group_id", inp.group_id) or require_positive("mute_id", inp.mute_id)
        if err:
            return new_tool_result_error(err)
        return await fetch(
            get_client, ctx, f"/api/n9e/busi-group/{inp.group_id}/alert-mute/{inp.mute_id}", AlertMute
        )

    return read_tool(
        "get_mute",
        "Get Alert Mute",
        "Get details of a specific alert mute by ID",
        GetMuteInput,
        handler,
    )


def create_mute_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: CreateMuteInput) -> CallToolResult:
        err = require_positive("group_id", inp.group_id) or inp.check()
        if err:
            return new_tool_result_error(err)

        client = get_client(ctx)
        if client is None:
            return new_tool_result_error(NO_CLIENT)

        path = f"/api/n9e/busi-group/{inp.group_id}/alert-mutes"
        try:
            mute_id = await client.post(path, int, inp.request_body(), ctx=ctx)
        except N9eError as exc:
            return new_tool_result_error(str(exc))

        return marshal_result({"id": mute_id, "message": "Alert mute created successfully"})

    return write_tool(
        "create_mute",
        "Create Alert Mute",
        "Create a new alert mute/silence rule. Use mute_time_type=0 for time range mode (btime/etime), "
        "or mute_time_type=1 for periodic mode (periodic_mutes).",
        CreateMuteInput,
        handler,
    )


def update_mute_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: UpdateMuteInput) -> CallToolResult:
        err = (
            require_positive("group_id", inp.group_id)
            or require_positive("mute_id", inp.mute_id)
            or inp.check()
        )
        if err:
            return new_tool_result_error(err)

        client = get_client(ctx)
        if client is None:
            return new_tool_result_error(NO_CLIENT)

        path = f"/api/n9e/busi-group/{inp.group_id}/alert-mute/{inp.mute_id}"
        try:
            await client.put(path, Any, inp.request_body(), ctx=ctx)
        except N9eError as exc:
            return new_tool_result_error(str(exc))

        return marshal_result({"id": inp.mute_id, "message": "Alert mute updated successfully"})

    return write_tool(
        "update_mute",
        "Update Alert Mute",
        "Update an existing alert mute/silence rule",
        UpdateMuteInput,
        handler,
    )


def register_mutes_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("mutes", "Alert mute/silence management tools")
    ts.add_read_tools(
        list_mutes_tool(get_client),
        get_mute_tool(get_client),
    )
    ts.add_write_tools(
        create_mute_tool(get_client),
        update_mute_tool(get_client),
    )
    group.add_toolset(ts)
