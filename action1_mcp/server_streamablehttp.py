import contextlib
import logging
import os
from collections.abc import AsyncIterator

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route
from starlette.types import Receive, Scope, Send

from action1_mcp.config import Settings
from action1_mcp.logger import configure_logging
from action1_mcp.server import Action1MCPServer


def build_app(action1_server: Action1MCPServer) -> Starlette:
    """Build the Starlette app serving MCP over streamable HTTP plus /health"""
    session_manager = StreamableHTTPSessionManager(
        app=action1_server.get_server(),
        event_store=None,
        json_response=True,
        stateless=True,
    )

    async def handle_streamable_http(scope: Scope, receive: Receive, send: Send) -> None:
        await session_manager.handle_request(scope, receive, send)

    async def health_handler(request: Request) -> JSONResponse:
        return JSONResponse({
            "status": "healthy",
            "server": action1_server.server_name,
            "baseUrl": action1_server.client.base_url,
            "tools_count": len(action1_server.tools),
        })

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        """Context manager for session manager lifecycle."""
        async with session_manager.run():
            logging.info("[Action1HTTP] Action1 MCP Streamable HTTP Server started")
            logging.info(f"[Action1HTTP] Tools: {sorted(action1_server.tools)}")
            try:
                yield
            finally:
                logging.info("[Action1HTTP] Action1 MCP Server shutting down...")

    return Starlette(
        routes=[
            Route("/health", health_handler, methods=["GET"]),
            Mount("/", app=handle_streamable_http),
        ],
        lifespan=lifespan,
    )


def main() -> None:
    configure_logging()
    port = int(os.getenv("PORT", 8080))
    host = os.getenv("HOST", "0.0.0.0")

    app = build_app(Action1MCPServer(Settings.from_env()))
    logging.info(f"[Action1HTTP] Listening on {host}:{port} (POST / for MCP, GET /health)")

    import uvicorn
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
