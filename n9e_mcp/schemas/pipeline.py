"""Event pipelines and their execution records."""

from __future__ import annotations

from typing import Any, List

from pydantic import Field

from n9e_mcp.schemas.common import N9eModel, TagFilter


class ProcessorConfig(N9eModel):
    typ: str = ""
    config: Any = None


class WorkflowNode(N9eModel):
    id: str = ""
    type: str = ""
    name: str = ""
    config: Any = None
    position: Any = None


class InputVariable(N9eModel):
    name: str = ""
    type: str = ""
    default: str = ""
    description: str = ""
    required: bool = False


class EventPipeline(N9eModel):
    id: int = 0
    name: str = ""
    typ: str = ""
    use_case: str = ""
    trigger_mode: str = ""
    disabled: bool = False
    team_ids: List[int] = Field(default_factory=list)
    team_names: List[str] = Field(default_factory=list)
    description: str = ""
    filter_enable: bool = False
    label_filters: List[TagFilter] = Field(default_factory=list)
    attr_filters: List[TagFilter] = Field(default_factory=list, alias="attribute_filters")
    processors: List[ProcessorConfig] = Field(default_factory=list)
    nodes: List[WorkflowNode] = Field(default_factory=list)
    connections: Any = None
    inputs: List[InputVariable] = Field(default_factory=list)
    create_at: int = 0
    create_by: str = ""
    update_at: int = 0
    update_by: str = ""


class EventPipelineExecution(N9eModel):
    """One run of a pipeline.  The id is a string, not an integer."""

    id: str = ""
    pipeline_id: int = 0
    pipeline_name: str = ""
    event_id: int = 0
    mode: str = ""
    status: str = ""
    node_results: str = ""
    error_message: str = ""
    error_node: str = ""
    created_at: int = 0
    finished_at: int = 0
    duration_ms: int = 0
    trigger_by: str = ""
    inputs_snapshot: str = ""
