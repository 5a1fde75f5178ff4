"""Slack MCP Gateway Server."""

import argparse
import json
import logging
import sys
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Any

import anyio
import uvicorn
from anyio.abc import TaskGroup
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mcp import types
from mcp.server.lowlevel import Server

from slack_gateway import __version__
from slack_gateway.config import GatewayConfig, credential_presence
from slack_gateway.mcp_gateway.constants import (
    SERVER_NAME,
    SERVER_VERSION,
    SSE_MESSAGE_PREFIX,
    SSE_PATHS,
    SSE_QUERY_MESSAGE_PATHS,
    STREAMABLE_HTTP_PATH,
)
from slack_gateway.mcp_gateway.dispatcher import ToolDispatcher, ToolResult
from slack_gateway.mcp_gateway.session import SessionRegistry
from slack_gateway.mcp_gateway.transports import (
    SseMessageEndpoint,
    SseStreamEndpoint,
    StreamableHTTPEndpoint,
)

_gateway_log = logging.getLogger("slack_gateway.mcp_gateway")

_PROCESS_STARTED_AT = time.monotonic()


class ToolCallFailed(Exception):
    """Raised to the MCP SDK so it answers with ``isError: true``."""


def _make_tool(spec: dict[str, Any]) -> types.Tool:
    return types.Tool(
        name=str(spec["name"]),
        description=str(spec["description"]),
        inputSchema=spec["input_schema"],
    )


def serialize_tool_result(result: ToolResult) -> list[types.TextContent]:
    """Render a successful ToolResult as MCP text content (JSON, indent 2)."""
    text = json.dumps(result.content, indent=2, ensure_ascii=False, default=str)
    return [types.TextContent(type="text", text=text)]


class SlackMCPGateway:
    """Slack MCP Gateway: one MCP server, one dispatcher, one session registry."""

    def __init__(
        self,
        dispatcher: ToolDispatcher | None = None,
        registry: SessionRegistry | None = None,
    ) -> None:
        self.dispatcher = dispatcher or ToolDispatcher()
        self.registry = registry or SessionRegistry()
        self.server = self._build_server()
        self._task_group: TaskGroup | None = None

    def _build_server(self) -> Server:
        server: Server = Server(SERVER_NAME, version=SERVER_VERSION)
        server.list_tools()(self.list_tools)
        # Arguments are validated by the dispatcher so failures stay tool results
        server.call_tool(validate_input=False)(self.call_tool)
        return server

    @property
    def task_group(self) -> TaskGroup:
        if self._task_group is None:
            raise RuntimeError("Gateway task group is not running")
        return self._task_group

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        """Own the task group that streamable-HTTP session loops run in."""
        async with anyio.create_task_group() as task_group:
            self._task_group = task_group
            try:
                yield
            finally:
                task_group.cancel_scope.cancel()
                self._task_group = None
        await self.registry.end_all()

    async def list_tools(self) -> list[types.Tool]:
        """List available Slack tools."""
        return [_make_tool(spec) for spec in self.dispatcher.specs]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        session_id = self._current_session_id()
        result = await self.dispatcher.dispatch(name, arguments or {}, session_id)
        if not result.success:
            raise ToolCallFailed(f"Error: {result.error}")
        return serialize_tool_result(result)

    def _current_session_id(self) -> str | None:
        try:
            request = self.server.request_context.request
        except LookupError:
            return None
        if request is None:
            return None
        session_id = request.headers.get("mcp-session-id")
        if session_id:
            return str(session_id)
        path_params = getattr(request, "path_params", {}) or {}
        return path_params.get("session_id")

    def health(self) -> dict[str, Any]:
        return {
            "status": "healthy",
            "uptime_s": round(time.monotonic() - _PROCESS_STARTED_AT),
            **credential_presence(),
            "active_sessions": len(self.registry),
        }


def create_app(
    config: GatewayConfig | None = None,
    gateway: SlackMCPGateway | None = None,
) -> FastAPI:
    """Build the HTTP application serving both MCP transports."""
    config = config or GatewayConfig()
    gateway = gateway or SlackMCPGateway()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        async with gateway.run():
            yield

    app = FastAPI(title="Slack MCP Gateway", version=__version__, lifespan=lifespan)
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Mcp-Session-Id", "Mcp-Protocol-Version"],
        expose_headers=["Mcp-Session-Id"],
    )

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok", "message": "Slack MCP Server is running"}

    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Liveness check; reports credential presence, never the values."""
        return gateway.health()

    app.add_route(
        STREAMABLE_HTTP_PATH,
        StreamableHTTPEndpoint(gateway, json_response=config.json_response),
        methods=["GET", "POST", "DELETE"],
        include_in_schema=False,
    )
    sse_stream = SseStreamEndpoint(gateway)
    for path in SSE_PATHS:
        app.add_route(path, sse_stream, methods=["GET"], include_in_schema=False)
    sse_messages = SseMessageEndpoint(gateway)
    for path in (f"{SSE_MESSAGE_PREFIX}/{{session_id}}/", *SSE_QUERY_MESSAGE_PATHS):
        app.add_route(path, sse_messages, methods=["POST"], include_in_schema=False)
    return app


def main_http(config: GatewayConfig) -> None:
    """Run the gateway's HTTP server."""
    app = create_app(config)

    print(f"Starting Slack MCP Gateway HTTP server on {config.host}:{config.port}", file=sys.stderr)
    missing = [name for name, present in credential_presence().items() if not present]
    if missing:
        _gateway_log.warning(
            "credentials_missing flags=%s; every tool call will fail until they are set",
            ",".join(missing),
        )

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        timeout_keep_alive=config.keep_alive_timeout,
    )


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    defaults = GatewayConfig.from_env()

    parser = argparse.ArgumentParser(description="Slack MCP Gateway Server")
    parser.add_argument("--host", default=defaults.host, help="HTTP server host")
    parser.add_argument("--port", type=int, default=defaults.port, help="HTTP server port")
    parser.add_argument(
        "--json-response",
        action="store_true",
        default=defaults.json_response,
        help="Answer streamable-HTTP POSTs with plain JSON instead of an SSE stream",
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    main_http(
        replace(
            defaults,
            host=args.host,
            port=args.port,
            json_response=args.json_response,
            log_level=args.log_level,
        )
    )


if __name__ == "__main__":
    main()
