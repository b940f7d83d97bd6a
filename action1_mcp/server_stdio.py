import asyncio
import logging
import os

from mcp.server.stdio import stdio_server

from action1_mcp.config import Settings
from action1_mcp.logger import configure_logging
from action1_mcp.server import Action1MCPServer


async def serve(action1_server: Action1MCPServer) -> None:
    server = action1_server.get_server()
    async with stdio_server() as (read_stream, write_stream):
        logging.info("[Action1MCP] MCP server started", extra={"meta": {"transport": "stdio"}})
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    if os.getenv("MCP_AUTOSTART") == "false":
        return
    configure_logging()
    asyncio.run(serve(Action1MCPServer(Settings.from_env())))


if __name__ == "__main__":
    main()
