"""MCP server and its stdio/SSE transports."""
