"""Builders for MCP tool results."""

from __future__ import annotations

import json
from typing import Any

from mcp.types import CallToolResult, TextContent
from pydantic_core import PydanticSerializationError, to_jsonable_python


def new_tool_result_text(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=False)


def new_tool_result_error(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


def marshal_result(value: Any) -> CallToolResult:
    """Serialize *value* as indented JSON text."""
    try:
        text = json.dumps(to_jsonable_python(value, by_alias=True), indent=2, ensure_ascii=False)
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        return new_tool_result_error(f"failed to marshal result: {exc}")
    return new_tool_result_text(text)


def result_text(result: CallToolResult) -> str:
    """Concatenated text content of a result."""
    return "".join(c.text for c in result.content if isinstance(c, TextContent))
