"""Notification rules."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import Field

from n9e_mcp.schemas.common import N9eModel, TagFilter


class PipelineConfig(N9eModel):
    pipeline_id: int = 0
    enable: bool = False


class TimeRange(N9eModel):
    start_time: str = ""
    end_time: str = ""
    weekdays: List[int] = Field(default_factory=list)


class NotifyConfig(N9eModel):
    channel_id: int = 0
    template_id: int = 0
    params: Dict[str, Any] = Field(default_factory=dict)
    type: str = ""
    severities: List[int] = Field(default_factory=list)
    time_ranges: List[TimeRange] = Field(default_factory=list)
    label_keys: List[TagFilter] = Field(default_factory=list)
    attributes: List[TagFilter] = Field(default_factory=list)


class NotifyRule(N9eModel):
    id: int = 0
    name: str = ""
    description: str = ""
    enable: bool = False
    user_group_ids: List[int] = Field(default_factory=list)
    pipeline_configs: List[PipelineConfig] = Field(default_factory=list)
    notify_configs: List[NotifyConfig] = Field(default_factory=list)
    create_at: int = 0
    create_by: str = ""
    update_at: int = 0
    update_by: str = ""
