"""
MCP surface — the ``notify`` tool served over stdio.
"""

from notify_mcp.mcp.handler import NotifyHandler, ToolResult
from notify_mcp.mcp.server import MCPServer

__all__ = ["MCPServer", "NotifyHandler", "ToolResult"]
