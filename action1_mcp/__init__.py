"""MCP adapter for the Action1 endpoint management API."""

__version__ = "0.1.0"
