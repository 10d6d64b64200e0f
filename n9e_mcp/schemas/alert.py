"""Alert events, alert rules and alert subscriptions."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import Field

from n9e_mcp.schemas.common import IdName, N9eModel


class AlertCurEvent(N9eModel):
    """Currently firing alert event."""

    id: int = 0
    hash: str = ""
    cate: str = ""
    cluster: str = ""
    datasource_id: int = 0

    rule_id: int = 0
    rule_name: str = ""
    rule_note: str = ""
    rule_prod: str = ""
    rule_algo: str = ""
    severity: int = 0

    prom_ql: str = ""
    prom_for_duration: int = 0
    prom_eval_interval: int = 0

    callbacks: List[str] = Field(default_factory=list)
    runbook_url: str = ""
    notify_recovered: int = 0
    notify_channels: List[str] = Field(default_factory=list)
    notify_groups: List[str] = Field(default_factory=list)
    notify_groups_obj: List[IdName] = Field(default_factory=list)

    target_ident: str = ""
    target_note: str = ""

    trigger_time: int = 0
    trigger_value: str = ""
    trigger_values: str = ""
    first_trigger_time: int = 0

    tags: List[str] = Field(default_factory=list)
    tags_map: Dict[str, str] = Field(default_factory=dict)
    original_tags: List[str] = Field(default_factory=list)
    annotations: Dict[str, str] = Field(default_factory=dict)

    group_id: int = 0
    group_name: str = ""

    status: int = 0
    claimant: str = ""
    notify_cur_number: int = 0


class AlertHisEvent(AlertCurEvent):
    """Historical alert event, recovered or not."""

    is_recovered: int = 0
    recover_time: int = 0


class AlertRule(N9eModel):
    # Loosely typed fields vary in shape across Nightingale versions.
    id: int = 0
    group_id: int = 0
    cate: str = ""
    datasource_ids: Any = None
    cluster: str = ""
    name: str = ""
    note: str = ""
    prod: str = ""
    algorithm: str = ""
    delay: int = 0
    severity: int = 0
    severities: Any = None
    disabled: int = 0
    prom_for_duration: int = 0
    prom_ql: str = ""
    rule_config: Any = None
    prom_eval_interval: int = 0
    enable_stimes: Any = None
    enable_etimes: Any = None
    enable_days_of_weeks: Any = None
    enable_in_bg: int = 0
    notify_recovered: int = 0
    notify_channels: Any = None
    notify_groups: Any = None
    notify_repeat_step: int = 0
    notify_max_number: int = 0
    notify_version: int = 0
    notify_rule_ids: Any = None
    recover_duration: int = 0
    callbacks: Any = None
    runbook_url: str = ""
    append_tags: Any = None
    annotations: Any = None
    create_at: int = 0
    create_by: str = ""
    update_at: int = 0
    update_by: str = ""


class AlertSubscribe(N9eModel):
    id: int = 0
    name: str = ""
    disabled: int = 0
    group_id: int = 0
    prod: str = ""
    cate: str = ""
    datasource_ids: Any = None
    cluster: str = ""
    rule_id: int = 0
    rule_ids: Any = None
    rule_name: str = ""
    severities: Any = None
    for_duration: int = 0
    tags: Any = None
    redefine_severity: int = 0
    new_severity: int = 0
    redefine_channels: int = 0
    new_channels: str = ""
    user_group_ids: str = ""
    redefine_webhooks: int = 0
    webhooks: Any = None
    note: str = ""
    busi_groups: Any = None
    notify_rule_ids: Any = None
    notify_version: int = 0
    create_at: int = 0
    create_by: str = ""
    update_at: int = 0
    update_by: str = ""
