"""MCP server exposing the Action1 tools.

Action1MCPServer wraps each tool function in an ADK FunctionTool, converts
them to MCP tool declarations for list_tools and formats tool results as
text content for call_tool.
"""

import json
import logging
from typing import Dict, List, Optional

from google.adk.tools.function_tool import FunctionTool
from google.adk.tools.mcp_tool.conversion_utils import adk_to_mcp_tool_type
from mcp import types as mcp_types
from mcp.server.lowlevel import Server

from ..api.client import ApiClient
from ..api.credentials import CredentialCache
from ..config import Settings
from .tools import Action1Tools

SERVER_NAME = "action1-mcp"


def format_result(result) -> str:
    """Render a tool result dict as the text returned to the MCP client"""
    if not isinstance(result, dict):
        return str(result)
    if result.get("success"):
        data = result.get("data")
        if data:
            return f"{result.get('message', 'Success')}\n\nResponse Data:\n{json.dumps(data, indent=2, default=str)}"
        return result.get("message", "Success - no data returned")

    message = result.get("message") or result.get("error") or "Unknown error occurred"
    details = {k: v for k, v in result.items() if k not in ("success", "message", "error") and v is not None}
    if details:
        return f"{message}\n\nDetails:\n{json.dumps(details, indent=2, default=str)}"
    return message


class Action1MCPServer:
    """MCP server serving the Action1 tool set

    Args:
        settings: Runtime configuration, read from the environment if omitted
        client: Preconfigured ApiClient; built from settings if omitted
        server_name: Name for the MCP server instance
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[ApiClient] = None,
        server_name: str = SERVER_NAME,
    ):
        self.settings = settings or (client.settings if client else Settings.from_env())
        self.client = client or ApiClient(self.settings, cache=CredentialCache())
        self.server_name = server_name
        self.server = Server(server_name)
        self.tool_set = Action1Tools(self.client)
        self.tools: Dict[str, FunctionTool] = {}
        for func in self.tool_set.functions():
            tool = FunctionTool(func)
            self.tools[tool.name] = tool
        self._setup_server()
        logging.info(f"[Action1MCP] Initialized MCP server '{server_name}' with {len(self.tools)} tools")

    def _setup_server(self) -> None:
        """Setup the MCP server with list_tools and call_tool handlers"""

        @self.server.list_tools()
        async def list_tools():
            tool_list = self.tool_declarations()
            logging.info(f"[Action1MCP] Returning {len(tool_list)} tools to MCP client")
            return tool_list

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict):
            logging.info(f"[Action1MCP] Tool call: {name}", extra={"meta": {"arguments": arguments}})
            text = await self.call(name, arguments)
            return [mcp_types.TextContent(type="text", text=text)]

    def tool_declarations(self) -> List[mcp_types.Tool]:
        """Convert every registered tool to its MCP declaration

        A tool that fails to convert is logged and left out of the list.
        """
        declarations = []
        for tool in self.tools.values():
            try:
                declarations.append(adk_to_mcp_tool_type(tool))
            except Exception as e:
                logging.error(f"[Action1MCP] Error converting tool {tool.name} to MCP type: {e}")
        return declarations

    async def call(self, name: str, arguments: Optional[dict] = None) -> str:
        """Run a tool by name and return its formatted text result"""
        tool = self.tools.get(name)
        if tool is None:
            logging.warning(f"[Action1MCP] Tool '{name}' not found")
            return f"Tool '{name}' not found"
        try:
            result = await tool.run_async(args=arguments or {}, tool_context=None)
        except Exception as e:
            logging.exception(f"[Action1MCP] Error executing tool '{name}': {e}")
            return f"Error executing tool: {str(e)}"
        if isinstance(result, dict) and result.get("success"):
            logging.info(f"[Action1MCP] Tool '{name}' succeeded")
        else:
            logging.info(f"[Action1MCP] Tool '{name}' did not succeed")
        return format_result(result)

    def get_server(self) -> Server:
        """Get the configured MCP server instance"""
        return self.server


__all__ = [
    "SERVER_NAME",
    "Action1MCPServer",
    "format_result",
]
