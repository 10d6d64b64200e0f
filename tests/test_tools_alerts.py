"""Alerts toolset handlers."""

from __future__ import annotations

import pytest

from fakes import Recorder, ok, result_error, result_json
from n9e_mcp.api.alerts import list_active_alerts_tool
from n9e_mcp.client import RequestContext, default_get_client
from n9e_mcp.toolset import ToolRequest


@pytest.mark.asyncio
async def test_list_active_alerts_forwards_filters(make_server):
    recorder = Recorder(ok({"list": [{"id": 11, "rule_name": "cpu high", "severity": 1}], "total": 1}))
    server = make_server(recorder)

    result = await server.call_tool(
        "list_active_alerts",
        {"hours": 6, "severity": "1,2", "bgid": 3, "cate": "prometheus", "limit": 10, "p": 1},
    )

    data = result_json(result)
    assert data["total"] == 1
    assert data["list"][0]["rule_name"] == "cpu high"

    request = recorder.last
    assert request.url.path == "/api/n9e/alert-cur-events/list"
    assert dict(request.url.params) == {
        "hours": "6",
        "severity": "1,2",
        "cate": "prometheus",
        "bgid": "3",
        "limit": "10",
        "p": "1",
    }


@pytest.mark.asyncio
async def test_list_active_alerts_omits_unset_filters(make_server):
    recorder = Recorder(ok({"list": [], "total": 0}))
    server = make_server(recorder)

    result_json(await server.call_tool("list_active_alerts", {}))

    assert dict(recorder.last.url.params) == {}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "arguments,message",
    [
        ({"hours": 1, "stime": 100}, "invalid input: hours and stime/etime are mutually exclusive"),
        ({"stime": 100, "etime": 50}, "invalid input: stime (100) must be less than etime (50)"),
        ({"severity": "1,4"}, "invalid input: invalid severity value: 4"),
        ({"limit": -1}, "invalid input: limit must be >= 0, got -1"),
        ({"cate": "mysql"}, "invalid input: invalid cate: mysql"),
        ({"rule_prods": "tracing"}, "invalid input: invalid rule_prod: tracing"),
    ],
)
async def test_list_active_alerts_rejects_bad_input(make_server, arguments, message):
    recorder = Recorder(ok({"list": [], "total": 0}))
    server = make_server(recorder)

    error = result_error(await server.call_tool("list_active_alerts", arguments))

    assert error.startswith(message)
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_validation_runs_before_client_lookup():
    tool = list_active_alerts_tool(default_get_client)

    result = await tool.handler(RequestContext(), ToolRequest("list_active_alerts", {"limit": -5}))

    assert result_error(result).startswith("invalid input:")


@pytest.mark.asyncio
async def test_missing_client_is_reported():
    tool = list_active_alerts_tool(default_get_client)

    result = await tool.handler(RequestContext(), ToolRequest("list_active_alerts", {}))

    assert result_error(result) == "failed to get n9e client from context"


@pytest.mark.asyncio
async def test_get_active_alert(make_server):
    recorder = Recorder(ok({"id": 5, "rule_name": "disk full", "tags": None}))
    server = make_server(recorder)

    data = result_json(await server.call_tool("get_active_alert", {"eid": 5}))

    assert recorder.last.url.path == "/api/n9e/alert-cur-event/5"
    assert data["rule_name"] == "disk full"
    assert data["tags"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("tool", ["get_active_alert", "get_history_alert"])
async def test_event_id_must_be_positive(make_server, tool):
    recorder = Recorder(ok({}))
    server = make_server(recorder)

    assert result_error(await server.call_tool(tool, {"eid": 0})) == "eid is required and must be positive"
    assert result_error(await server.call_tool(tool, {})) == "eid is required and must be positive"
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_list_history_alerts_all_severities(make_server):
    recorder = Recorder(ok({"list": [{"id": 1, "is_recovered": 1, "recover_time": 1700000000}], "total": 1}))
    server = make_server(recorder)

    data = result_json(
        await server.call_tool("list_history_alerts", {"severity": -1, "is_recovered": -1, "hours": 24})
    )

    assert recorder.last.url.path == "/api/n9e/alert-his-events/list"
    assert dict(recorder.last.url.params) == {"hours": "24", "severity": "-1", "is_recovered": "-1"}
    assert data["list"][0]["recover_time"] == 1700000000


@pytest.mark.asyncio
async def test_list_history_alerts_rejects_bad_values(make_server):
    server = make_server(Recorder(ok({})))

    assert result_error(await server.call_tool("list_history_alerts", {"severity": 7})).startswith(
        "invalid input: invalid severity value: 7"
    )
    assert result_error(await server.call_tool("list_history_alerts", {"is_recovered": 3})).startswith(
        "invalid input: invalid is_recovered: 3"
    )


@pytest.mark.asyncio
async def test_get_history_alert(make_server):
    recorder = Recorder(ok({"id": 8}))
    server = make_server(recorder)

    result_json(await server.call_tool("get_history_alert", {"eid": 8}))

    assert recorder.last.url.path == "/api/n9e/alert-his-event/8"


@pytest.mark.asyncio
async def test_list_alert_rules(make_server):
    recorder = Recorder(ok([{"id": 1, "name": "cpu", "rule_config": {"queries": []}}]))
    server = make_server(recorder)

    data = result_json(await server.call_tool("list_alert_rules", {"group_id": 2}))

    assert recorder.last.url.path == "/api/n9e/busi-group/2/alert-rules"
    assert data[0]["rule_config"] == {"queries": []}


@pytest.mark.asyncio
async def test_list_alert_rules_requires_group(make_server):
    server = make_server(Recorder(ok([])))
    assert result_error(await server.call_tool("list_alert_rules", {})) == (
        "group_id is required and must be positive"
    )


@pytest.mark.asyncio
async def test_get_alert_rule(make_server):
    recorder = Recorder(ok({"id": 4, "name": "mem"}))
    server = make_server(recorder)

    data = result_json(await server.call_tool("get_alert_rule", {"arid": 4}))

    assert recorder.last.url.path == "/api/n9e/alert-rule/4"
    assert data["name"] == "mem"
    assert result_error(await server.call_tool("get_alert_rule", {"arid": -1})) == (
        "arid is required and must be positive"
    )


@pytest.mark.asyncio
async def test_api_error_becomes_error_result(make_server):
    server = make_server(Recorder(ok(None, "no such rule")))

    error = result_error(await server.call_tool("get_alert_rule", {"arid": 99}))

    assert error.startswith("n9e api error: GET /api/n9e/alert-rule/99 status=200")
    assert 'err="no such rule"' in error
