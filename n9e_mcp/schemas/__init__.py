"""Pydantic models for Nightingale API payloads."""

from n9e_mcp.schemas.alert import AlertCurEvent, AlertHisEvent, AlertRule, AlertSubscribe
from n9e_mcp.schemas.common import IdName, N9eModel, N9eResponse, PageResp, TagFilter
from n9e_mcp.schemas.mute import AlertMute, PeriodicMute
from n9e_mcp.schemas.notify import NotifyConfig, NotifyRule, PipelineConfig, TimeRange
from n9e_mcp.schemas.pipeline import (
    EventPipeline,
    EventPipelineExecution,
    InputVariable,
    ProcessorConfig,
    WorkflowNode,
)
from n9e_mcp.schemas.target import BusiGroup, Datasource, Target
from n9e_mcp.schemas.user import User, UserGroup, UserGroupDetail

__all__ = [
    "AlertCurEvent",
    "AlertHisEvent",
    "AlertMute",
    "AlertRule",
    "AlertSubscribe",
    "BusiGroup",
    "Datasource",
    "EventPipeline",
    "EventPipelineExecution",
    "IdName",
    "InputVariable",
    "N9eModel",
    "N9eResponse",
    "NotifyConfig",
    "NotifyRule",
    "PageResp",
    "PeriodicMute",
    "PipelineConfig",
    "ProcessorConfig",
    "TagFilter",
    "Target",
    "TimeRange",
    "User",
    "UserGroup",
    "UserGroupDetail",
    "WorkflowNode",
]
