"""Toolsets – named bundles of MCP tools that can be enabled independently."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, ClassVar, Protocol, TypeVar

from mcp.types import CallToolResult, Tool
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from n9e_mcp.client.context import RequestContext
from n9e_mcp.toolset.helpers import new_tool_result_error

logger = logging.getLogger("n9e.toolset")

ALL_TOOLSETS = "all"

DEFAULT_TOOLSETS = [
    "alerts",
    "targets",
    "datasource",
    "mutes",
    "busi_groups",
    "notify_rules",
    "alert_subscribes",
    "event_pipelines",
    "users",
]


class UnknownToolsetError(ValueError):
    """An enabled toolset name does not match any registered toolset."""


# ---------------------------------------------------------------------------
# Tool plumbing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ToolRequest:
    """Inbound invocation: tool name plus the raw argument payload."""

    name: str
    arguments: dict[str, Any] | str | bytes | None = None


ToolHandler = Callable[[RequestContext, ToolRequest], Awaitable[CallToolResult]]

InputT = TypeVar("InputT", bound="ToolInput")


class ToolInput(BaseModel):
    """Base for tool parameter objects.

    ``null`` arguments fall back to the field default and unknown keys are
    ignored.  ``required_fields`` only feeds the advertised JSON schema;
    handlers still check the values themselves.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    required_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @classmethod
    def input_schema(cls) -> dict[str, Any]:
        schema = cls.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        for prop in schema["properties"].values():
            prop.pop("title", None)
        if cls.required_fields:
            schema["required"] = list(cls.required_fields)
        return schema


def make_tool_handler(
    input_model: type[InputT],
    handler: Callable[[RequestContext, ToolRequest, InputT], Awaitable[CallToolResult]],
) -> ToolHandler:
    """Wrap a typed handler into the untyped shape the server dispatches to."""

    async def wrapped(ctx: RequestContext, request: ToolRequest) -> CallToolResult:
        payload = request.arguments
        if payload:
            try:
                if isinstance(payload, (str, bytes, bytearray)):
                    data = input_model.model_validate_json(payload)
                else:
                    data = input_model.model_validate(payload)
            except ValidationError as exc:
                return new_tool_result_error(f"failed to parse input: {exc}")
        else:
            data = input_model()
        return await handler(ctx, request, data)

    return wrapped


@dataclass(frozen=True)
class ServerTool:
    tool: Tool
    handler: ToolHandler


class ToolRegistrar(Protocol):
    def add_tool(self, tool: Tool, handler: ToolHandler) -> None: ...


# ---------------------------------------------------------------------------
# Toolsets
# ---------------------------------------------------------------------------


@dataclass
class Toolset:
    name: str
    description: str
    read_tools: list[ServerTool] = field(default_factory=list)
    write_tools: list[ServerTool] = field(default_factory=list)

    def add_read_tools(self, *tools: ServerTool) -> Toolset:
        self.read_tools.extend(tools)
        return self

    def add_write_tools(self, *tools: ServerTool) -> Toolset:
        self.write_tools.extend(tools)
        return self


class ToolsetGroup:
    """Registry of toolsets with an enabled subset and a global read-only switch.

    Built once during startup: every toolset is added, ``enable_toolsets`` is
    called with the operator's selection and ``register_all`` exposes the
    tools.  Nothing mutates it after that.
    """

    def __init__(self, read_only: bool = False) -> None:
        self._toolsets: dict[str, Toolset] = {}
        self._enabled: set[str] = set()
        self.read_only = read_only

    def add_toolset(self, toolset: Toolset) -> None:
        self._toolsets[toolset.name] = toolset

    def get_toolset(self, name: str) -> Toolset | None:
        return self._toolsets.get(name)

    def enable_toolsets(self, names: list[str]) -> None:
        """Enable toolsets by name.

        ``"all"`` anywhere in *names* enables every known toolset.  An unknown
        name raises :class:`UnknownToolsetError` and leaves the enabled set
        untouched.
        """
        if any(name.strip() == ALL_TOOLSETS for name in names):
            self._enabled.update(self._toolsets)
            return

        selected: set[str] = set()
        for name in names:
            name = name.strip()
            if not name:
                continue
            if name not in self._toolsets:
                raise UnknownToolsetError(
                    f"unknown toolset: {name} (available: {', '.join(self.available_toolsets())})"
                )
            selected.add(name)
        self._enabled.update(selected)

    def register_all(self, server: ToolRegistrar) -> int:
        """Expose every enabled tool on *server*; returns the number exposed."""
        count = 0
        for name, toolset in self._toolsets.items():
            if name not in self._enabled:
                continue
            for st in toolset.read_tools:
                server.add_tool(st.tool, st.handler)
                count += 1
            if self.read_only:
                if toolset.write_tools:
                    logger.info(
                        "read-only mode: skipping %d write tool(s) of %s",
                        len(toolset.write_tools), name,
                    )
                continue
            for st in toolset.write_tools:
                server.add_tool(st.tool, st.handler)
                count += 1
        return count

    def available_toolsets(self) -> list[str]:
        return sorted(self._toolsets)

    def enabled_toolsets(self) -> list[str]:
        return sorted(self._enabled)
