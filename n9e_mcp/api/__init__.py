"""Nightingale tool catalogue, one module per toolset."""

from __future__ import annotations

from n9e_mcp.api.alert_subscribes import register_alert_subscribes_toolset
from n9e_mcp.api.alerts import register_alerts_toolset
from n9e_mcp.api.busi_groups import register_busi_groups_toolset
from n9e_mcp.api.datasource import register_datasource_toolset
from n9e_mcp.api.event_pipelines import register_event_pipelines_toolset
from n9e_mcp.api.mutes import register_mutes_toolset
from n9e_mcp.api.notify_rules import register_notify_rules_toolset
from n9e_mcp.api.targets import register_targets_toolset
from n9e_mcp.api.users import register_users_toolset
from n9e_mcp.client import GetClientFunc
from n9e_mcp.toolset import ToolsetGroup


def default_toolset_group(get_client: GetClientFunc, read_only: bool = False) -> ToolsetGroup:
    """Build the group holding every known toolset (none enabled yet)."""
    group = ToolsetGroup(read_only)
    register_alerts_toolset(group, get_client)
    register_targets_toolset(group, get_client)
    register_datasource_toolset(group, get_client)
    register_mutes_toolset(group, get_client)
    register_busi_groups_toolset(group, get_client)
    register_notify_rules_toolset(group, get_client)
    register_alert_subscribes_toolset(group, get_client)
    register_event_pipelines_toolset(group, get_client)
    register_users_toolset(group, get_client)
    return group


__all__ = ["default_toolset_group"]
