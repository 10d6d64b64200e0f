"""Nightingale MCP server – exposes the Nightingale REST API as MCP tools."""

__version__ = "0.1.0"
