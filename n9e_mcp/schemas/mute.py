"""Alert mute (silence) rules."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from n9e_mcp.schemas.common import N9eModel


class PeriodicMute(N9eModel):
    enable_stime: str = Field("", description="Start time in HH:MM format")
    enable_etime: str = Field("", description="End time in HH:MM format")
    enable_days_of_week: str = Field("", description="Days of week (0-6, space-separated, 0=Sunday)")


class AlertMute(N9eModel):
    id: int = 0
    group_id: int = 0
    note: str = ""
    cate: str = ""
    prod: str = ""
    datasource_ids: Any = None
    cluster: str = ""
    tags: Any = None
    cause: str = ""
    btime: int = 0
    etime: int = 0
    severities: Any = None
    disabled: int = 0
    activated: int = 0
    mute_time_type: int = 0
    periodic_mutes: Any = None
    create_at: int = 0
    create_by: str = ""
    update_at: int = 0
    update_by: str = ""
