"""Shared response envelope and base schema."""

from __future__ import annotations

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class N9eModel(BaseModel):
    """Base for Nightingale payloads.

    Unknown fields are kept so that anything the server adds is passed
    through to the caller.  ``null`` is read as "field absent" and falls back
    to the field default.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class N9eResponse(N9eModel, Generic[T]):
    """Uniform ``{"dat": ..., "err": ""}`` envelope."""

    dat: Optional[T] = None
    err: str = ""


class PageResp(N9eModel, Generic[T]):
    """Paginated payload ``{"list": [...], "total": n}``."""

    items: List[T] = Field(default_factory=list, alias="list")
    total: int = 0


class IdName(N9eModel):
    id: int = 0
    name: str = ""


class TagFilter(N9eModel):
    key: str = Field("", description="Tag key")
    func: str = Field("", description="Operator: ==, !=, in, not in, =~, !~")
    value: str = Field("", description="Tag value (for 'in'/'not in', space-separated values)")
