"""Users and user groups (teams)."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import Field

from n9e_mcp.schemas.common import N9eModel
from n9e_mcp.schemas.target import BusiGroup


class User(N9eModel):
    id: int = 0
    username: str = ""
    nickname: str = ""
    phone: str = ""
    email: str = ""
    portrait: str = ""
    roles: List[str] = Field(default_factory=list)
    contacts: Dict[str, Any] = Field(default_factory=dict)
    maintainer: int = 0
    create_at: int = 0
    create_by: str = ""
    update_at: int = 0
    update_by: str = ""
    belong: str = ""
    admin: bool = False
    last_active_time: int = 0


class UserGroup(N9eModel):
    id: int = 0
    name: str = ""
    note: str = ""
    create_at: int = 0
    create_by: str = ""
    update_at: int = 0
    update_by: str = ""
    users: List[User] = Field(default_factory=list)
    busi_groups: List[BusiGroup] = Field(default_factory=list)


class UserGroupDetail(N9eModel):
    """A user group together with its members."""

    user_group: UserGroup = Field(default_factory=UserGroup)
    users: List[User] = Field(default_factory=list)
