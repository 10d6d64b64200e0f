"""Event pipelines toolset – workflows and their execution records."""

from __future__ import annotations

from typing import List
from urllib.parse import quote

from mcp.types import CallToolResult
from pydantic import Field

from n9e_mcp.api.common import fetch, invalid_input, positive, query_params, read_tool, require_positive
from n9e_mcp.client import GetClientFunc, RequestContext
from n9e_mcp.schemas import EventPipeline, EventPipelineExecution, PageResp
from n9e_mcp.toolset import ServerTool, ToolInput, ToolRequest, Toolset, ToolsetGroup, new_tool_result_error
from n9e_mcp.toolset.validate import validate_pagination


class ListEventPipelinesInput(ToolInput):
    pass


class GetEventPipelineInput(ToolInput):
    required_fields = ("id",)

    id: int = Field(0, description="Event pipeline ID")


class ListEventPipelineExecutionsInput(ToolInput):
    required_fields = ("pipeline_id",)

    pipeline_id: int = Field(0, description="Event pipeline ID")
    mode: str = Field("", description="Trigger mode filter (event/api/cron)")
    status: str = Field("", description="Status filter (running/success/failed)")
    limit: int = Field(0, description="Page size (default 20, max 1000)")
    p: int = Field(0, description="Page number (starts from 1)")


class ListAllEventPipelineExecutionsInput(ToolInput):
    pipeline_id: int = Field(0, description="Filter by pipeline ID")
    pipeline_name: str = Field("", description="Filter by pipeline name")
    mode: str = Field("", description="Trigger mode filter (event/api/cron)")
    status: str = Field("", description="Status filter (running/success/failed)")
    limit: int = Field(0, description="Page size (default 20, max 1000)")
    p: int = Field(0, description="Page number (starts from 1)")


class GetEventPipelineExecutionInput(ToolInput):
    required_fields = ("exec_id",)

    exec_id: str = Field("", description="Execution ID (UUID)")


def list_event_pipelines_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: ListEventPipelinesInput) -> CallToolResult:
        return await fetch(get_client, ctx, "/api/n9e/event-pipelines", List[EventPipeline])

    return read_tool(
        "list_event_pipelines",
        "List Event Pipelines",
        "List all event pipelines/workflows that the current user has access to",
        ListEventPipelinesInput,
        handler,
    )


def get_event_pipeline_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(ctx: RequestContext, request: ToolRequest, inp: GetEventPipelineInput) -> CallToolResult:
        err = require_positive("id", inp.id)
        if err:
            return new_tool_result_error(err)
        return await fetch(get_client, ctx, f"/api/n9e/event-pipeline/{inp.id}", EventPipeline)

    return read_tool(
        "get_event_pipeline",
        "Get Event Pipeline",
        "Get details of a specific event pipeline/workflow by ID",
        GetEventPipelineInput,
        handler,
    )


def list_event_pipeline_executions_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(
        ctx: RequestContext, request: ToolRequest, inp: ListEventPipelineExecutionsInput
    ) -> CallToolResult:
        err = require_positive("pipeline_id", inp.pipeline_id)
        if err:
            return new_tool_result_error(err)
        err = validate_pagination(inp.limit, inp.p)
        if err:
            return invalid_input(err)

        params = query_params(
            mode=inp.mode,
            status=inp.status,
            limit=positive(inp.limit),
            p=positive(inp.p),
        )
        return await fetch(
            get_client,
            ctx,
            f"/api/n9e/event-pipeline/{inp.pipeline_id}/executions",
            PageResp[EventPipelineExecution],
            params,
        )

    return read_tool(
        "list_event_pipeline_executions",
        "List Pipeline Executions",
        "List execution records for a specific event pipeline",
        ListEventPipelineExecutionsInput,
        handler,
    )


def list_all_event_pipeline_executions_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(
        ctx: RequestContext, request: ToolRequest, inp: ListAllEventPipelineExecutionsInput
    ) -> CallToolResult:
        err = validate_pagination(inp.limit, inp.p)
        if err:
            return invalid_input(err)

        params = query_params(
            pipeline_id=positive(inp.pipeline_id),
            pipeline_name=inp.pipeline_name,
            mode=inp.mode,
            status=inp.status,
            limit=positive(inp.limit),
            p=positive(inp.p),
        )
        return await fetch(
            get_client,
            ctx,
            "/api/n9e/event-pipeline-executions",
            PageResp[EventPipelineExecution],
            params,
        )

    return read_tool(
        "list_all_event_pipeline_executions",
        "List All Pipeline Executions",
        "List all event pipeline execution records across all pipelines",
        ListAllEventPipelineExecutionsInput,
        handler,
    )


def get_event_pipeline_execution_tool(get_client: GetClientFunc) -> ServerTool:
    async def handler(
        ctx: RequestContext, request: ToolRequest, inp: GetEventPipelineExecutionInput
    ) -> CallToolResult:
        if not inp.exec_id:
            return new_tool_result_error("exec_id is required")
        exec_id = quote(inp.exec_id, safe="")
        return await fetch(
            get_client, ctx, f"/api/n9e/event-pipeline-execution/{exec_id}", EventPipelineExecution
        )

    return read_tool(
        "get_event_pipeline_execution",
        "Get Pipeline Execution",
        "Get details of a specific pipeline execution by execution ID",
        GetEventPipelineExecutionInput,
        handler,
    )


def register_event_pipelines_toolset(group: ToolsetGroup, get_client: GetClientFunc) -> None:
    ts = Toolset("event_pipelines", "Event pipeline/workflow management tools for event processing")
    ts.add_read_tools(
        list_event_pipelines_tool(get_client),
        get_event_pipeline_tool(get_client),
        list_event_pipeline_executions_tool(get_client),
        list_all_event_pipeline_executions_tool(get_client),
        get_event_pipeline_execution_tool(get_client),
    )
    group.add_toolset(ts)
