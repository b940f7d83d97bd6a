"""MCP server package.

Tool functions, the destructive-action gate and the MCP server that exposes
them.
"""

from .core import Action1MCPServer
from .guard import GuardDecision, allow_destructive
from .tools import TOOL_NAMES, Action1Tools

__all__ = [
    "Action1MCPServer",
    "Action1Tools",
    "GuardDecision",
    "TOOL_NAMES",
    "allow_destructive",
]
