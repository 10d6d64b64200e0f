"""Toolset registry, handler adapter and parameter validators."""

from n9e_mcp.toolset.helpers import (
    marshal_result,
    new_tool_result_error,
    new_tool_result_text,
    result_text,
)
from n9e_mcp.toolset.toolsets import (
    ALL_TOOLSETS,
    DEFAULT_TOOLSETS,
    ServerTool,
    ToolHandler,
    ToolInput,
    ToolRegistrar,
    ToolRequest,
    Toolset,
    ToolsetGroup,
    UnknownToolsetError,
    make_tool_handler,
)

__all__ = [
    "marshal_result",
    "new_tool_result_error",
    "new_tool_result_text",
    "result_text",
    "ALL_TOOLSETS",
    "DEFAULT_TOOLSETS",
    "ServerTool",
    "ToolHandler",
    "ToolInput",
    "ToolRegistrar",
    "ToolRequest",
    "Toolset",
    "ToolsetGroup",
    "UnknownToolsetError",
    "make_tool_handler",
]
