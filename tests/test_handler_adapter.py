"""Tool handler adapter – argument decoding into typed inputs."""

from __future__ import annotations

import pytest
from pydantic import Field

from fakes import result_error
from n9e_mcp.client import RequestContext
from n9e_mcp.toolset import ToolInput, ToolRequest, make_tool_handler, new_tool_result_text


class EchoInput(ToolInput):
    required_fields = ("group_id",)

    group_id: int = Field(0, description="Business group ID")
    query: str = Field("", description="Search keyword")


async def _echo(ctx, request, inp: EchoInput):
    return new_tool_result_text(f"{inp.group_id}:{inp.query}")


handler = make_tool_handler(EchoInput, _echo)


async def _call(arguments):
    return await handler(RequestContext(), ToolRequest("echo", arguments))


@pytest.mark.asyncio
async def test_dict_arguments():
    result = await _call({"group_id": 3, "query": "web"})
    assert result.content[0].text == "3:web"


@pytest.mark.asyncio
async def test_raw_json_arguments():
    result = await _call('{"group_id": 4}')
    assert result.content[0].text == "4:"


@pytest.mark.asyncio
async def test_missing_arguments_use_defaults():
    assert (await _call(None)).content[0].text == "0:"
    assert (await _call({})).content[0].text == "0:"


@pytest.mark.asyncio
async def test_nulls_and_unknown_keys():
    result = await _call({"group_id": 5, "query": None, "surprise": True})
    assert result.content[0].text == "5:"


@pytest.mark.asyncio
async def test_wrong_type_is_reported_not_raised():
    message = result_error(await _call({"group_id": "many"}))
    assert message.startswith("failed to parse input:")


@pytest.mark.asyncio
async def test_malformed_json_is_reported():
    message = result_error(await _call("{not json"))
    assert message.startswith("failed to parse input:")


def test_input_schema():
    schema = EchoInput.input_schema()
    assert schema["type"] == "object"
    assert schema["required"] == ["group_id"]
    assert "title" not in schema
    assert schema["properties"]["group_id"]["type"] == "integer"
    assert schema["properties"]["group_id"]["description"] == "Business group ID"
    assert "title" not in schema["properties"]["query"]
