"""MCP server bootstrap – registers toolsets, resources, prompts and runs stdio."""

from __future__ import annotations

import asyncio
import contextlib
import glob
import gzip
import json
import logging
import os
import shutil
import signal
import sys
import time
from logging.handlers import RotatingFileHandler
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    CallToolResult,
    GetPromptResult,
    Prompt,
    PromptArgument,
    PromptMessage,
    Resource,
    TextContent,
    Tool,
)

from n9e_mcp import __version__
from n9e_mcp.api import default_toolset_group
from n9e_mcp.client import N9eClient, RequestContext, default_get_client
from n9e_mcp.config import Settings
from n9e_mcp.middleware import ToolMiddleware, inject_client
from n9e_mcp.toolset import (
    ServerTool,
    ToolHandler,
    ToolRequest,
    ToolsetGroup,
    new_tool_result_error,
    result_text,
)

logger = logging.getLogger("mcp.server")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_MAX_BYTES = 100 * 1024 * 1024
LOG_BACKUP_COUNT = 3
LOG_MAX_AGE_DAYS = 7

TOOLSETS_RESOURCE_URI = "n9e://toolsets"

# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


class N9eMcpServer:
    """Tool table plus middleware chain, exposed through ``mcp.server.Server``.

    ``list_tools``/``call_tool`` and friends are plain coroutines so the SSE
    transport can drive the same server without the MCP session layer.
    """

    def __init__(self, name: str, version: str) -> None:
        self.name = name
        self.version = version
        self.client: N9eClient | None = None
        self.toolsets: ToolsetGroup | None = None
        self._tools: dict[str, ServerTool] = {}
        self._middleware: list[ToolMiddleware] = []
        self.server = Server(name, version=version)
        self._register_handlers()

    def add_tool(self, tool: Tool, handler: ToolHandler) -> None:
        self._tools[tool.name] = ServerTool(tool, handler)

    def add_middleware(self, middleware: ToolMiddleware) -> None:
        """Wrap every tool handler; the first middleware added runs outermost."""
        self._middleware.append(middleware)

    # ── Tools ─────────────────────────────────────────────────────────────

    async def list_tools(self) -> list[Tool]:
        return [st.tool for st in self._tools.values()]

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | str | bytes | None,
        ctx: RequestContext | None = None,
    ) -> CallToolResult:
        st = self._tools.get(name)
        if st is None:
            return new_tool_result_error(f"unknown tool: {name}")

        handler = st.handler
        for middleware in reversed(self._middleware):
            handler = middleware(handler)

        result = await handler(ctx or RequestContext(), ToolRequest(name, arguments))
        if result.isError:
            logger.warning("tool %s returned error: %s", name, result_text(result))
        return result

    # ── Resources ─────────────────────────────────────────────────────────

    async def list_resources(self) -> list[Resource]:
        return [
            Resource(
                uri=TOOLSETS_RESOURCE_URI,
                name="Toolsets",
                description="Available and enabled toolsets and the read-only flag",
                mimeType="application/json",
            ),
        ]

    async def read_resource(self, uri: str) -> str:
        if str(uri).rstrip("/") == TOOLSETS_RESOURCE_URI:
            group = self.toolsets
            return json.dumps(
                {
                    "available": group.available_toolsets() if group else [],
                    "enabled": group.enabled_toolsets() if group else [],
                    "read_only": group.read_only if group else False,
                },
                indent=2,
            )

        raise ValueError(f"Unknown resource: {uri}")

    # ── Prompts ───────────────────────────────────────────────────────────

    async def list_prompts(self) -> list[Prompt]:
        return [
            Prompt(
                name="alert_triage",
                description="Triage currently firing alerts and suggest next steps",
                arguments=[
                    PromptArgument(
                        name="bgid",
                        description="Business group ID to focus on (optional)",
                        required=False,
                    ),
                    PromptArgument(
                        name="hours",
                        description="Lookback hours for alert history (default 24)",
                        required=False,
                    ),
                ],
            ),
        ]

    async def get_prompt(self, name: str, arguments: dict[str, str] | None = None) -> GetPromptResult:
        args = arguments or {}

        if name == "alert_triage":
            hours = int(args.get("hours") or 24)
            bgid = args.get("bgid")
            scope = f" in business group {bgid}" if bgid else ""
            bgid_arg = f" with bgid={bgid}" if bgid else ""
            return GetPromptResult(
                description="Alert triage workflow",
                messages=[
                    PromptMessage(
                        role="user",
                        content=TextContent(
                            type="text",
                            text=(
                                f"Triage the alerts currently firing{scope}:\n\n"
                                f"1. Use list_active_alerts{bgid_arg} to get firing alerts, "
                                "critical ones (severity=1) first\n"
                                "2. For the top alerts, use get_active_alert and get_alert_rule "
                                "to see the rule, its query and annotations\n"
                                f"3. Use list_history_alerts with hours={hours} to check whether "
                                "the same rules have been flapping\n"
                                "4. Check list_mutes for the business group to see whether any "
                                "alert is already silenced\n"
                                "5. Summarise each alert with its likely cause and a suggested "
                                "action (investigate, mute, or escalate)"
                            ),
                        ),
                    )
                ],
            )

        raise ValueError(f"Unknown prompt: {name}")

    # ── Protocol wiring ───────────────────────────────────────────────────

    def _register_handlers(self) -> None:
        server = self.server

        @server.list_tools()
        async def _list_tools() -> list[Tool]:
            return await self.list_tools()

        @server.call_tool(validate_input=False)
        async def _call_tool(name: str, arguments: dict | None) -> CallToolResult:
            return await self.call_tool(name, arguments)

        @server.list_resources()
        async def _list_resources() -> list[Resource]:
            return await self.list_resources()

        @server.read_resource()
        async def _read_resource(uri: Any) -> str:
            return await self.read_resource(str(uri))

        @server.list_prompts()
        async def _list_prompts() -> list[Prompt]:
            return await self.list_prompts()

        @server.get_prompt()
        async def _get_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
            return await self.get_prompt(name, arguments)


# ---------------------------------------------------------------------------
# Server factory
# ---------------------------------------------------------------------------


def create_mcp_server(settings: Settings, *, client: N9eClient | None = None) -> N9eMcpServer:
    """Build the client (unless one is given), the toolset group and the server.

    Raises ``ValueError`` for an unusable token/base URL and
    :class:`~n9e_mcp.toolset.UnknownToolsetError` for a bad toolset name.
    """
    group = default_toolset_group(default_get_client, settings.read_only)
    group.enable_toolsets(settings.toolset_names)

    if client is None:
        client = N9eClient(settings.token, settings.base_url, f"n9e-mcp-server/{__version__}")

    server = N9eMcpServer(settings.mcp_server_name, __version__)
    server.client = client
    server.add_middleware(inject_client(client))
    count = group.register_all(server)
    server.toolsets = group

    logger.info(
        "registered %d tool(s) from toolsets %s (read_only=%s)",
        count, group.enabled_toolsets(), settings.read_only,
    )
    return server


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def gzip_namer(name: str) -> str:
    return name + ".gz"


def gzip_rotator(source: str, dest: str) -> None:
    """Compress the rolled-over log into *dest* and prune stale backups."""
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)

    cutoff = time.time() - LOG_MAX_AGE_DAYS * 86400
    for backup in glob.glob(glob.escape(source) + ".*.gz"):
        if os.path.getmtime(backup) < cutoff:
            os.remove(backup)


def configure_logging(settings: Settings) -> None:
    """Log to stderr, or to a rotating file when ``log_file`` is set.

    Rotated files are gzipped and dropped after ``LOG_MAX_AGE_DAYS``.
    stdout is reserved for the stdio protocol stream.
    """
    if settings.log_file:
        handler: logging.Handler = RotatingFileHandler(
            settings.log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
        )
        handler.namer = gzip_namer
        handler.rotator = gzip_rotator
    else:
        handler = logging.StreamHandler(sys.stderr)
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, handlers=[handler], force=True)


def reload_log_level() -> None:
    """Re-read ``N9E_MCP_LOG_LEVEL`` and apply it to the root logger."""
    level = Settings().log_level
    logging.getLogger().setLevel(level)
    logger.info("log level reloaded: %s", logging.getLevelName(level))


# ---------------------------------------------------------------------------
# Entry-point: run MCP server over stdio
# ---------------------------------------------------------------------------


async def run_stdio_server(settings: Settings) -> None:
    """Serve over stdio until the client disconnects or SIGINT/SIGTERM arrives."""
    configure_logging(settings)

    loop = asyncio.get_running_loop()
    stop = asyncio.Event()
    installed: list[int] = []
    for sig, callback in (
        (signal.SIGINT, stop.set),
        (signal.SIGTERM, stop.set),
        (getattr(signal, "SIGUSR1", None), reload_log_level),
    ):
        if sig is None:
            continue
        try:
            loop.add_signal_handler(sig, callback)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support
            continue
        installed.append(sig)

    logger.info(
        "starting n9e-mcp-server version=%s base_url=%s read_only=%s toolsets=%s",
        __version__, settings.base_url, settings.read_only, settings.toolset_names,
    )

    try:
        mcp_server = create_mcp_server(settings)
        try:
            async with stdio_server() as (read_stream, write_stream):
                serve = asyncio.create_task(
                    mcp_server.server.run(
                        read_stream, write_stream, mcp_server.server.create_initialization_options()
                    )
                )
                print("Nightingale MCP Server running on stdio", file=sys.stderr)

                stopped = asyncio.create_task(stop.wait())
                done, _ = await asyncio.wait({serve, stopped}, return_when=asyncio.FIRST_COMPLETED)
                if stopped in done:
                    logger.info("shutting down server...")
                    serve.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await serve
                else:
                    stopped.cancel()
                    exc = serve.exception()
                    if exc is not None:
                        logger.error("server error: %s", exc)
                        raise exc
        finally:
            if mcp_server.client is not None:
                await mcp_server.client.aclose()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
