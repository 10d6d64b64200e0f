"""SSE (Server-Sent Events) transport for the Nightingale MCP server.

This module exposes the same tool catalogue over HTTP using SSE, which is
useful for web-based MCP clients and for hosts where a stdio subprocess is
not an option.

Run with:
    n9e-mcp-server sse

SSE endpoint: GET  /sse
Message post: POST /messages?session_id=<id>
Health check: GET  /health
"""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from mcp.types import LATEST_PROTOCOL_VERSION
from sse_starlette.sse import EventSourceResponse

from n9e_mcp.client import N9eClient, RequestContext
from n9e_mcp.config import Settings
from n9e_mcp.mcp.server import configure_logging, create_mcp_server

logger = logging.getLogger("mcp.sse")

KEEPALIVE_SECONDS = 30.0

METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
PARSE_ERROR = -32700


def _result(rpc_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _error(rpc_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_sse_app(settings: Settings, *, client: N9eClient | None = None) -> FastAPI:
    """Build the FastAPI app.  Configuration errors propagate to the caller."""
    mcp_server = create_mcp_server(settings, client=client)
    session_ids = itertools.count(1)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("MCP SSE transport starting on %s:%s", settings.sse_host, settings.sse_port)
        yield
        logger.info("MCP SSE transport shutting down")
        app.state.sessions.clear()
        if mcp_server.client is not None:
            await mcp_server.client.aclose()

    app = FastAPI(
        title="Nightingale MCP Server – SSE Transport",
        version=mcp_server.version,
        lifespan=lifespan,
    )
    # In-memory message queues keyed by session_id
    app.state.sessions = {}
    app.state.mcp_server = mcp_server

    # ── Health ────────────────────────────────────────────────────────────

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "transport": "sse",
            "version": mcp_server.version,
        }

    # ── SSE endpoint ──────────────────────────────────────────────────────

    @app.get("/sse")
    async def sse_endpoint(request: Request):
        """Server-Sent Events stream for MCP protocol messages.

        The client opens this endpoint to receive messages from the server,
        posts requests to ``/messages?session_id=<id>`` and reads the
        responses from this stream.
        """
        session_id = f"session-{next(session_ids)}"
        queue: asyncio.Queue = asyncio.Queue()
        app.state.sessions[session_id] = queue
        logger.debug("SSE session %s opened", session_id)

        async def event_generator():
            # First event: tell the client where to POST requests
            yield {
                "event": "endpoint",
                "data": f"/messages?session_id={session_id}",
            }

            try:
                while True:
                    if await request.is_disconnected():
                        break
                    try:
                        message = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                    except asyncio.TimeoutError:
                        yield {"comment": "keepalive"}
                        continue
                    yield {
                        "event": "message",
                        "data": json.dumps(message, default=str),
                    }
            finally:
                app.state.sessions.pop(session_id, None)
                logger.debug("SSE session %s closed", session_id)

        return EventSourceResponse(event_generator())

    # ── Message endpoint (client → server) ────────────────────────────────

    @app.post("/messages")
    async def messages_endpoint(request: Request, session_id: str):
        """Receive a JSON-RPC request, process it and push the response onto
        the SSE stream of the matching session.
        """
        queue = app.state.sessions.get(session_id)
        if queue is None:
            return JSONResponse(
                status_code=404,
                content={"error": f"Session '{session_id}' not found. Connect to /sse first."},
            )

        try:
            body = await request.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            await queue.put(_error(None, PARSE_ERROR, "Parse error"))
            return Response(status_code=202, content="Accepted")

        logger.debug("SSE recv session=%s body=%s", session_id, body)

        method = body.get("method", "")
        params = body.get("params") or {}
        rpc_id = body.get("id")

        # Notifications carry no id and get no reply
        if method.startswith("notifications/"):
            return Response(status_code=202, content="Accepted")

        response = await dispatch(method, params, rpc_id)
        await queue.put(response)
        return Response(status_code=202, content="Accepted")

    async def dispatch(method: str, params: dict[str, Any], rpc_id: Any) -> dict[str, Any]:
        if method == "initialize":
            return _result(
                rpc_id,
                {
                    "protocolVersion": LATEST_PROTOCOL_VERSION,
                    "capabilities": {
                        "tools": {"listChanged": False},
                        "resources": {"listChanged": False},
                        "prompts": {"listChanged": False},
                    },
                    "serverInfo": {
                        "name": mcp_server.name,
                        "version": mcp_server.version,
                    },
                },
            )

        if method == "tools/list":
            tools = await mcp_server.list_tools()
            return _result(rpc_id, {"tools": [t.model_dump(mode="json", by_alias=True, exclude_none=True) for t in tools]})

        if method == "tools/call":
            result = await mcp_server.call_tool(
                params.get("name", ""), params.get("arguments"), RequestContext()
            )
            return _result(rpc_id, result.model_dump(mode="json", by_alias=True, exclude_none=True))

        if method == "resources/list":
            resources = await mcp_server.list_resources()
            return _result(
                rpc_id, {"resources": [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in resources]}
            )

        if method == "resources/read":
            uri = params.get("uri", "")
            try:
                content = await mcp_server.read_resource(uri)
            except ValueError as exc:
                return _error(rpc_id, INVALID_PARAMS, str(exc))
            return _result(
                rpc_id, {"contents": [{"uri": uri, "text": content, "mimeType": "application/json"}]}
            )

        if method == "prompts/list":
            prompts = await mcp_server.list_prompts()
            return _result(
                rpc_id, {"prompts": [p.model_dump(mode="json", by_alias=True, exclude_none=True) for p in prompts]}
            )

        if method == "prompts/get":
            try:
                prompt = await mcp_server.get_prompt(params.get("name", ""), params.get("arguments"))
            except ValueError as exc:
                return _error(rpc_id, INVALID_PARAMS, str(exc))
            return _result(rpc_id, prompt.model_dump(mode="json", by_alias=True, exclude_none=True))

        return _error(rpc_id, METHOD_NOT_FOUND, f"Method '{method}' not found")

    return app


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------


def run_sse_server(settings: Settings) -> None:
    import uvicorn

    configure_logging(settings)
    app = create_sse_app(settings)
    uvicorn.run(app, host=settings.sse_host, port=settings.sse_port, log_config=None)
