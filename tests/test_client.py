"""Transport client – retry policy, cancellation, headers and size cap."""

from __future__ import annotations

import asyncio
import json
import socket

import httpx
import pytest

from fakes import TOKEN, Recorder, ok
from n9e_mcp.client import client as client_module
from n9e_mcp.client import (
    N9eClient,
    RequestCanceledError,
    RequestContext,
    RequestTimeoutError,
    RetriesExhaustedError,
    TransportError,
)
from n9e_mcp.client.client import (
    MAX_RESPONSE_SIZE,
    is_retryable_error,
    parse_retry_after,
    retry_delay,
)


# ── Construction ──────────────────────────────────────────────────────────


def test_token_is_required():
    with pytest.raises(ValueError, match="token is required"):
        N9eClient("", "http://n9e.test")


def test_base_url_defaults_to_localhost():
    client = N9eClient("t")
    assert client.base_url == "http://localhost:17000"


def test_invalid_base_url_rejected():
    with pytest.raises(ValueError, match="invalid base URL"):
        N9eClient("t", "not a url")


def test_set_user_agent():
    client = N9eClient("t", "http://n9e.test", "a/1")
    client.set_user_agent("b/2")
    assert client.user_agent == "b/2"


# ── Retry helpers ─────────────────────────────────────────────────────────


@pytest.mark.parametrize("attempt", [0, 1, 2, 3])
def test_retry_delay_bounds(attempt):
    base = 2**attempt
    for _ in range(50):
        delay = retry_delay(attempt)
        assert base <= delay < base * 1.25


@pytest.mark.parametrize(
    "value,expected",
    [("2", 2.0), ("", 0.0), ("0", 0.0), ("-3", 0.0), ("soon", 0.0), ("Wed, 21 Oct 2015 07:28:00 GMT", 0.0)],
)
def test_parse_retry_after(value, expected):
    headers = httpx.Headers({"Retry-After": value} if value else {})
    assert parse_retry_after(headers) == expected


def test_retryable_errors():
    assert is_retryable_error(httpx.ReadTimeout("slow"))
    assert not is_retryable_error(httpx.ConnectError("refused"))

    dns = httpx.ConnectError("dns")
    dns.__cause__ = socket.gaierror(socket.EAI_AGAIN, "Temporary failure in name resolution")
    assert is_retryable_error(dns)

    gone = httpx.ConnectError("dns")
    gone.__cause__ = socket.gaierror(socket.EAI_NONAME, "Name or service not known")
    assert not is_retryable_error(gone)


# ── Retry loop ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_503_retries_four_attempts_then_gives_up(make_client, sleeps):
    recorder = Recorder(httpx.Response(503, text="unavailable"))
    client = make_client(recorder)

    with pytest.raises(RetriesExhaustedError) as excinfo:
        await client.request("GET", "/api/n9e/busi-groups")

    assert len(recorder.requests) == 4
    assert len(sleeps.calls) == 3
    for attempt, delay in enumerate(sleeps.calls):
        assert 2**attempt <= delay < 1.25 * 2**attempt

    err = excinfo.value
    assert str(err).startswith("max retries exceeded: server error: 503")
    assert err.status_code == 503
    assert isinstance(err.__cause__, TransportError)
    assert err.__cause__.status_code == 503


@pytest.mark.asyncio
async def test_5xx_then_success(make_client, sleeps):
    recorder = Recorder(httpx.Response(502), ok([]))
    client = make_client(recorder)

    raw = await client.request("GET", "/api/n9e/busi-groups")

    assert raw.status_code == 200
    assert len(recorder.requests) == 2
    assert len(sleeps.calls) == 1


@pytest.mark.asyncio
async def test_429_honors_retry_after(make_client, sleeps):
    recorder = Recorder(httpx.Response(429, headers={"Retry-After": "2"}), ok([]))
    client = make_client(recorder)

    await client.request("GET", "/api/n9e/busi-groups")

    assert sleeps.calls == [2.0]


@pytest.mark.asyncio
async def test_429_without_retry_after_uses_backoff(make_client, sleeps):
    recorder = Recorder(httpx.Response(429), ok([]))
    client = make_client(recorder)

    await client.request("GET", "/api/n9e/busi-groups")

    assert len(sleeps.calls) == 1
    assert 1.0 <= sleeps.calls[0] < 1.25


@pytest.mark.asyncio
async def test_429_exhausted(make_client):
    client = make_client(Recorder(httpx.Response(429, headers={"X-Request-Id": "rid-9"})))

    with pytest.raises(RetriesExhaustedError) as excinfo:
        await client.request("GET", "/api/n9e/busi-groups")

    assert "rate limited (429)" in str(excinfo.value)
    assert excinfo.value.request_id == "rid-9"


@pytest.mark.asyncio
async def test_400_is_not_retried(make_client, sleeps):
    recorder = Recorder(httpx.Response(400, text="bad request"))
    client = make_client(recorder)

    with pytest.raises(TransportError) as excinfo:
        await client.request("GET", "/api/n9e/busi-groups")

    assert not isinstance(excinfo.value, RetriesExhaustedError)
    assert len(recorder.requests) == 1
    assert sleeps.calls == []
    assert str(excinfo.value) == "client error: 400 bad request"
    assert excinfo.value.status_code == 400


@pytest.mark.asyncio
async def test_4xx_body_preview_is_capped(make_client):
    client = make_client(Recorder(httpx.Response(404, text="x" * 500)))

    with pytest.raises(TransportError) as excinfo:
        await client.request("GET", "/missing")

    assert str(excinfo.value) == "client error: 404 " + "x" * 200 + "..."


@pytest.mark.asyncio
async def test_timeout_is_retried(make_client, sleeps):
    recorder = Recorder(httpx.ReadTimeout("timed out"), ok([]))
    client = make_client(recorder)

    raw = await client.request("GET", "/api/n9e/busi-groups")

    assert raw.status_code == 200
    assert len(recorder.requests) == 2
    assert len(sleeps.calls) == 1


@pytest.mark.asyncio
async def test_timeouts_exhaust_retries(make_client):
    recorder = Recorder(httpx.ConnectTimeout("timed out"))
    client = make_client(recorder)

    with pytest.raises(RetriesExhaustedError) as excinfo:
        await client.request("GET", "/api/n9e/busi-groups")

    assert len(recorder.requests) == 4
    assert isinstance(excinfo.value.__cause__, httpx.ConnectTimeout)


@pytest.mark.asyncio
async def test_connection_refused_is_not_retried(make_client, sleeps):
    recorder = Recorder(httpx.ConnectError("connection refused"))
    client = make_client(recorder)

    with pytest.raises(TransportError, match="request failed"):
        await client.request("GET", "/api/n9e/busi-groups")

    assert len(recorder.requests) == 1
    assert sleeps.calls == []


# ── Cancellation and deadlines ────────────────────────────────────────────


@pytest.mark.asyncio
async def test_canceled_context_makes_no_attempt(make_client):
    recorder = Recorder(ok([]))
    client = make_client(recorder)
    ctx = RequestContext()
    ctx.cancel()

    with pytest.raises(RequestCanceledError, match="request canceled"):
        await client.request("GET", "/api/n9e/busi-groups", ctx=ctx)

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_expired_deadline_makes_no_attempt(make_client):
    recorder = Recorder(ok([]))
    client = make_client(recorder)

    with pytest.raises(RequestTimeoutError, match="request timeout"):
        await client.request("GET", "/api/n9e/busi-groups", ctx=RequestContext().with_timeout(0))

    assert recorder.requests == []


@pytest.mark.asyncio
async def test_cancel_during_backoff_stops_retrying(make_client, sleeps):
    recorder = Recorder(httpx.Response(503))
    client = make_client(recorder)
    ctx = RequestContext()
    sleeps.on_sleep = lambda _: ctx.cancel()

    with pytest.raises(RequestCanceledError) as excinfo:
        await client.request("GET", "/api/n9e/busi-groups", ctx=ctx)

    assert len(recorder.requests) == 1
    assert isinstance(excinfo.value.__cause__, TransportError)


# ── Request shape ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_get_headers_and_query(make_client):
    recorder = Recorder(ok([]))
    client = make_client(recorder)

    await client.request("GET", "/api/n9e/targets", {"limit": "5", "query": "web"})

    request = recorder.last
    assert request.url.path == "/api/n9e/targets"
    assert request.url.params["limit"] == "5"
    assert request.url.params["query"] == "web"
    assert request.headers["X-User-Token"] == "test-token"
    assert request.headers["Accept"] == "application/json"
    assert request.headers["User-Agent"] == "n9e-mcp-server/test"
    assert "Content-Type" not in request.headers


@pytest.mark.asyncio
async def test_post_sends_json_body(make_client):
    recorder = Recorder(ok(7))
    client = make_client(recorder)

    await client.request("POST", "/api/n9e/busi-group/1/alert-mutes", body={"cause": "deploy"})

    request = recorder.last
    assert request.method == "POST"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"cause": "deploy"}


@pytest.mark.asyncio
async def test_request_id_is_captured(make_client):
    client = make_client(Recorder(ok([], headers={"X-Request-Id": "abc-123"})))

    raw = await client.request("GET", "/api/n9e/busi-groups")

    assert raw.request_id == "abc-123"


@pytest.mark.asyncio
async def test_base_url_path_is_resolved(make_client):
    recorder = Recorder(ok([]))
    client = make_client(recorder, base_url="http://n9e.test:17000")

    await client.request("GET", "/api/n9e/busi-groups")

    assert str(recorder.last.url) == "http://n9e.test:17000/api/n9e/busi-groups"


@pytest.mark.asyncio
async def test_response_body_is_capped(make_client):
    client = make_client(Recorder(httpx.Response(200, content=b"a" * (MAX_RESPONSE_SIZE + 1024))))

    raw = await client.request("GET", "/big")

    assert len(raw.body) == MAX_RESPONSE_SIZE


@pytest.mark.asyncio
async def test_attempt_deadline_covers_slow_body(monkeypatch, sleeps):
    monkeypatch.setattr(client_module, "DEFAULT_TIMEOUT", 0.5)
    connections = []

    async def drip(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        connections.append(writer)
        try:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\nContent-Length: 8\r\n\r\n")
            await writer.drain()
            # every byte arrives well inside the read timeout, the body never finishes in time
            for byte in b'{"dat":1':
                writer.write(bytes([byte]))
                await writer.drain()
                await asyncio.sleep(0.25)
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(drip, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    loop = asyncio.get_running_loop()

    async with server:
        async with N9eClient(TOKEN, f"http://127.0.0.1:{port}", sleep=sleeps) as client:
            started = loop.time()
            with pytest.raises(RetriesExhaustedError) as excinfo:
                await client.request("GET", "/api/n9e/busi-groups")
            elapsed = loop.time() - started

    assert len(connections) == 4
    assert len(sleeps.calls) == 3
    assert elapsed < 3.5
    assert "attempt exceeded 0.5s timeout" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, TransportError)
