"""Command line entry-point: ``n9e-mcp-server [stdio|sse|version]``."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any

from pydantic import ValidationError

from n9e_mcp import __version__
from n9e_mcp.client.client import DEFAULT_BASE_URL
from n9e_mcp.config import Settings
from n9e_mcp.toolset import DEFAULT_TOOLSETS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="n9e-mcp-server",
        description="MCP (Model Context Protocol) server for Nightingale",
    )
    parser.add_argument("--token", help="Nightingale API token (env: N9E_TOKEN)")
    parser.add_argument(
        "--base-url", help=f"Nightingale API base URL (env: N9E_BASE_URL, default {DEFAULT_BASE_URL})"
    )
    parser.add_argument(
        "--toolsets",
        help=f"Enabled toolsets, comma-separated or 'all' (env: N9E_TOOLSETS, default {','.join(DEFAULT_TOOLSETS)})",
    )
    parser.add_argument(
        "--read-only",
        action="store_true",
        default=None,
        help="Read-only mode, disable write operations (env: N9E_READ_ONLY)",
    )
    parser.add_argument("--log-file", help="Log file path (default: stderr)")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("stdio", help="Run in stdio mode (default)")
    sub.add_parser("sse", help="Serve over HTTP with Server-Sent Events")
    sub.add_parser("version", help="Print version information")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Environment and ``.env`` first, explicitly passed flags on top."""
    overrides: dict[str, Any] = {
        "token": args.token,
        "base_url": args.base_url,
        "toolsets": args.toolsets,
        "read_only": args.read_only,
        "log_file": args.log_file,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "stdio"

    if command == "version":
        print(f"n9e-mcp-server {__version__}")
        return

    try:
        settings = load_settings(args)
        settings.require_token()
        if command == "sse":
            from n9e_mcp.mcp.sse_server import run_sse_server

            run_sse_server(settings)
        else:
            from n9e_mcp.mcp.server import run_stdio_server

            asyncio.run(run_stdio_server(settings))
    except (ValueError, ValidationError) as exc:
        # ConfigError, UnknownToolsetError and bad client settings all land here
        print(exc, file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
