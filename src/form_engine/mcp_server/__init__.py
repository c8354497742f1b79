"""
MCP Server module for Form Engine.

Exposes validation and derived-value computation as Model Context
Protocol tools, with stdio and SSE transport support.
"""

from form_engine.mcp_server.server import create_mcp_server, run_mcp_server
from form_engine.mcp_server.tools import get_mcp_tools, handle_tool_call

__all__ = [
    "create_mcp_server",
    "run_mcp_server",
    "get_mcp_tools",
    "handle_tool_call",
]
