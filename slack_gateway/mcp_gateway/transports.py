"""HTTP transports for the Slack MCP Gateway.

The endpoints are raw ASGI callables mounted on the FastAPI app. They own
no session state themselves: every lookup, creation and teardown goes
through the gateway's ``SessionRegistry``.
"""

import json
import logging
import re
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import anyio
from anyio.abc import TaskStatus
from mcp.server.sse import SseServerTransport
from mcp.server.streamable_http import StreamableHTTPServerTransport
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import Message, Receive, Scope, Send

from slack_gateway.mcp_gateway.constants import (
    MCP_SESSION_ID_HEADER,
    SESSION_QUERY_ALIASES,
    SSE_MESSAGE_PREFIX,
)
from slack_gateway.mcp_gateway.session import NO_VALID_SESSION_MESSAGE, NoValidSessionError

if TYPE_CHECKING:
    from slack_gateway.mcp_gateway.server import SlackMCPGateway

_transport_log = logging.getLogger("slack_gateway.mcp_gateway.transports")

STREAMABLE_HTTP = "streamable-http"
SSE = "sse"

_TRANSPORT_SESSION_PATTERN = re.compile(rb"[?&]session_id=([0-9a-f]{32})")


def _jsonrpc_error(status_code: int, message: str, code: int = -32000) -> JSONResponse:
    return JSONResponse(
        {"jsonrpc": "2.0", "id": None, "error": {"code": code, "message": message}},
        status_code=status_code,
    )


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Hand an already-read request body to the next ASGI consumer."""
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


async def _run_server_logged(
    gateway: "SlackMCPGateway", session_id: str, read_stream: Any, write_stream: Any
) -> None:
    server = gateway.server
    try:
        await server.run(read_stream, write_stream, server.create_initialization_options())
    except Exception as e:
        _transport_log.error(
            "session_crashed session_id=%s error=%s",
            session_id,
            str(e),
            exc_info=True,
            extra={"session_id": session_id, "error": str(e)},
        )


class StreamableHTTPEndpoint:
    """``/mcp``: session ids issued on ``initialize``, carried in ``Mcp-Session-Id``."""

    def __init__(self, gateway: "SlackMCPGateway", json_response: bool = False) -> None:
        self.gateway = gateway
        self.json_response = json_response

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        session_id = request.headers.get(MCP_SESSION_ID_HEADER)

        if session_id is not None:
            await self._handle_existing(session_id, request, scope, receive, send)
            return

        if request.method != "POST":
            await _jsonrpc_error(400, NO_VALID_SESSION_MESSAGE)(scope, receive, send)
            return

        body = await request.body()
        try:
            message = json.loads(body)
        except ValueError:
            await _jsonrpc_error(400, "Parse error", code=-32700)(scope, receive, send)
            return

        try:
            session = await self.gateway.registry.begin(None, message, self._open_transport)
        except NoValidSessionError as e:
            await _jsonrpc_error(400, str(e))(scope, receive, send)
            return
        except Exception as e:
            _transport_log.error("session_open_failed error=%s", str(e), exc_info=True)
            await _jsonrpc_error(500, "Internal error", code=-32603)(scope, receive, send)
            return

        await session.transport.handle_request(scope, _replay_body(body, receive), send)

    async def _handle_existing(
        self, session_id: str, request: Request, scope: Scope, receive: Receive, send: Send
    ) -> None:
        session = await self.gateway.registry.resolve(session_id)
        if session is None or session.transport_kind != STREAMABLE_HTTP:
            await _jsonrpc_error(404, NO_VALID_SESSION_MESSAGE)(scope, receive, send)
            return

        await session.transport.handle_request(scope, receive, send)
        if request.method == "DELETE":
            await self.gateway.registry.end(session_id)

    async def _open_transport(
        self, session_id: str
    ) -> tuple[StreamableHTTPServerTransport, anyio.CancelScope]:
        transport = StreamableHTTPServerTransport(
            mcp_session_id=session_id,
            is_json_response_enabled=self.json_response,
        )
        cancel_scope = await self.gateway.task_group.start(self._run_session, session_id, transport)
        return transport, cancel_scope

    async def _run_session(
        self,
        session_id: str,
        transport: StreamableHTTPServerTransport,
        *,
        task_status: TaskStatus[anyio.CancelScope] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        try:
            with anyio.CancelScope() as cancel_scope:
                async with transport.connect() as (read_stream, write_stream):
                    task_status.started(cancel_scope)
                    await _run_server_logged(self.gateway, session_id, read_stream, write_stream)
        finally:
            with anyio.CancelScope(shield=True):
                await self.gateway.registry.end(session_id)


class SseConnection:
    """One legacy SSE stream: the SDK transport and the id it announced.

    ``SseServerTransport`` routes posted messages by its own ``session_id``
    query parameter, which it only reveals in the ``endpoint`` event. The
    connection reads that id off the outgoing stream so a message addressed
    by the gateway's session id can be forwarded to the right stream.
    """

    def __init__(self, transport: SseServerTransport) -> None:
        self.transport = transport
        self.transport_session_id: str | None = None

    def watch(self, send: Send) -> Send:
        async def watched(message: Message) -> None:
            if self.transport_session_id is None and message["type"] == "http.response.body":
                match = _TRANSPORT_SESSION_PATTERN.search(message.get("body", b""))
                if match:
                    self.transport_session_id = match.group(1).decode()
            await send(message)

        return watched

    async def handle_post_message(
        self, session_id: str, scope: Scope, receive: Receive, send: Send
    ) -> None:
        if self.transport_session_id is not None:
            scope = {
                **scope,
                "query_string": urlencode({"session_id": self.transport_session_id}).encode(),
                "path_params": {**scope.get("path_params", {}), "session_id": session_id},
            }
        await self.transport.handle_post_message(scope, receive, send)


class SseStreamEndpoint:
    """``GET /sse``: one event stream per connection, registered for its lifetime."""

    def __init__(self, gateway: "SlackMCPGateway") -> None:
        self.gateway = gateway

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        registry = self.gateway.registry
        session_id = await registry.issue_id()
        connection = SseConnection(SseServerTransport(f"{SSE_MESSAGE_PREFIX}/{session_id}/"))
        try:
            with anyio.CancelScope() as cancel_scope:
                async with connection.transport.connect_sse(
                    scope, receive, connection.watch(send)
                ) as (read_stream, write_stream):
                    await registry.register(session_id, connection, SSE, cancel_scope)
                    await _run_server_logged(self.gateway, session_id, read_stream, write_stream)
        finally:
            with anyio.CancelScope(shield=True):
                await registry.end(session_id)


def _message_session_id(request: Request) -> str | None:
    """The gateway session id from the path, else from a query alias."""
    session_id = request.path_params.get("session_id")
    if session_id:
        return str(session_id)
    for key in SESSION_QUERY_ALIASES:
        value = request.query_params.get(key)
        if value:
            return value
    return None


class SseMessageEndpoint:
    """Client-to-server messages for an SSE stream.

    Served at ``/messages/{session_id}/`` and, for clients that address the
    session by query parameter, at ``POST /message`` and ``POST /sse/mcp``.
    """

    def __init__(self, gateway: "SlackMCPGateway") -> None:
        self.gateway = gateway

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        session_id = _message_session_id(request)
        if not session_id:
            response = JSONResponse({"error": "Missing sessionId query parameter"}, status_code=400)
            await response(scope, receive, send)
            return

        session = await self.gateway.registry.resolve(session_id)
        if session is None or session.transport_kind != SSE:
            response = JSONResponse({"error": "Unknown or expired sessionId"}, status_code=404)
            await response(scope, receive, send)
            return

        await session.transport.handle_post_message(session_id, scope, receive, send)
