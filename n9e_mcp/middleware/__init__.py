from n9e_mcp.middleware.inject import ToolMiddleware, inject_client

__all__ = ["ToolMiddleware", "inject_client"]
