"""Monitored targets, business groups and datasources."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from n9e_mcp.schemas.common import N9eModel


class BusiGroup(N9eModel):
    id: int = 0
    name: str = ""
    label_enable: int = 0
    label_value: str = ""
    create_at: int = 0
    create_by: str = ""
    update_at: int = 0
    update_by: str = ""


class Target(N9eModel):
    id: int = 0
    group_id: int = 0
    group_obj: Optional[BusiGroup] = None
    ident: str = ""
    note: str = ""
    tags: List[str] = Field(default_factory=list)
    tags_map: Dict[str, str] = Field(default_factory=dict)
    host_ip: str = ""
    agent_version: str = ""
    target_up: int = 0
    engine_name: str = ""
    unix_time: int = 0
    update_at: int = 0
    offset: int = 0
    os: str = ""
    arch: str = ""
    remote_addr: str = ""
    cpu_num: int = 0
    mem_size: int = 0


class Datasource(N9eModel):
    """Datasource as returned by ``/datasource/brief``.

    HTTP, TLS and auth settings are passed through as-is.
    """

    id: int = 0
    name: str = ""
    identifier: str = ""
    description: str = ""
    plugin_id: int = 0
    plugin_type: str = ""
    plugin_type_name: str = ""
    category: str = ""
    cluster_name: str = ""
    settings: Dict[str, Any] = Field(default_factory=dict)
    status: str = ""
    http: Dict[str, Any] = Field(default_factory=dict)
    is_default: bool = False
    created_at: int = 0
    created_by: str = ""
    updated_at: int = 0
    updated_by: str = ""
