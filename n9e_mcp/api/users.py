"""Users toolset – users and user groups (teams)."""

from __future__ import annotations

from typing import List

from mcp.types import CallToolResult
from pydantic import Field

from n9e_mcp.api.common import fetch, invalid_input, positive, query_params, read_tool, require_positive
from n9e_mcp.client import GetClientFunc, RequestContext
from n9e_mcp.schemas import PageResp, User, UserGroup, UserGroupDetail
from n9e_mcp.toolset import ServerTool, ToolInput, ToolRequest, Toolset, ToolsetGroup, new_tool_result_error
from n9e_mcp.toolset.validate import validate_pagination


class ListUsersInput(ToolInput):
    query: str = Field("", description="Search keyword (matches username/nickname/email/phone)")
    limit: int = Field(0, description="Page size (default 20)")
    p: int = Field(0, description="Page number (starts from 1)")


class GetUserInput(ToolInput):
    required_fields = ("id",)

    id: int = Field(0, description="User ID")


class ListUserGroupsInput(ToolInput):
    query: str = Field("", description="Search keyword for group name")
    limit: int = Field(0, description="Maximum number of groups to return (default 1500)")


class GetUserGroupInput(ToolInput):
    required_fields = ("id",)

    id: int = Field(0, description="User group ID")


def list_users_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListUsersInput) -> CallToolResult:
        err = validate_pagination(inp.limit, inp.p)
        if err:
            return invalid_input(err)
        params = query_params(query=inp.query, limit=positive(inp.limit), p=positive(inp.p))
        return await fetch(get_client, ctx, "/api/n9e/users", PageResp[User], params)

    return read_tool(
        "list_users",
        "List Users",
        "List users with optional filters",
        ListUsersInput,
        handler,
    )


def get_user_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetUserInput) -> CallToolResult:
        err = require_positive("id", inp.id)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/user/{inp.id}/profile", User)

    return read_tool(
        "get_user",
        "Get User",
        "Get details of a specific user by ID",
        GetUserInput,
        handler,
    )


def list_user_groups_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListUserGroupsInput) -> CallToolResult:
        params = query_params(query=inp.query, limit=positive(inp.limit))
        return await fetch(get_client, ctx, "/api/n9e/user-groups", List[UserGroup], params)

    return read_tool(
        "list_user_groups",
        "List User Groups",
        "List user groups/teams that the current user has access to",
        ListUserGroupsInput,
        handler,
    )


def get_user_group_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetUserGroupInput) -> CallToolResult:
        err = require_positive("id", inp.id)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/user-group/{inp.id}", UserGroupDetail)

    return read_tool(
        "get_user_group",
        "Get User Group",
        "Get details of a specific user group including its members",
        GetUserGroupInput,
        handler,
    )


def register_users_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("users", "User and user group management tools")
    ts.add_read_tools(
        list_users_tool(get_client),
        get_user_tool(get_client),
        list_user_groups_tool(get_client),
        get_user_group_tool(get_client),
    )
    group.add_toolset(ts)
