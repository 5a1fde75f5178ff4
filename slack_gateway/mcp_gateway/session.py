"""Session registry for the Slack MCP Gateway transports."""

import asyncio
import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import anyio

_session_log = logging.getLogger("slack_gateway.mcp_gateway.session")

NO_VALID_SESSION_MESSAGE = "Bad Request: No valid session ID provided"

# Receives the new session id; returns the ready transport and the cancel
# scope that aborts its work.
TransportOpener = Callable[[str], Awaitable[tuple[Any, anyio.CancelScope | None]]]


class NoValidSessionError(Exception):
    """A request referenced no session, or one the registry does not know."""

    def __init__(self, message: str = NO_VALID_SESSION_MESSAGE) -> None:
        super().__init__(message)


class DuplicateSessionError(Exception):
    """A transport tried to register an id that is already live."""


def is_initialize_request(message: Any) -> bool:
    """Check whether a decoded JSON-RPC payload opens an MCP session."""
    if isinstance(message, list):
        return any(is_initialize_request(item) for item in message)
    if not isinstance(message, dict):
        return False
    return message.get("method") == "initialize" and "id" in message


@dataclass
class Session:
    """A live transport bound to one session id."""

    session_id: str
    transport: Any
    transport_kind: str
    created_at: float = field(default_factory=time.time)
    cancel_scope: anyio.CancelScope | None = None

    def close(self) -> None:
        """Abort any work still running on behalf of this session."""
        if self.cancel_scope is not None:
            self.cancel_scope.cancel()


class SessionRegistry:
    """Owns the session id -> transport mapping.

    Every mutation and lookup goes through one asyncio lock, so concurrent
    connections never observe a half-registered session. Ids are random
    uuid4 hex strings and an ended session keeps no state behind.
    """

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def list_session_ids(self) -> list[str]:
        return sorted(self._sessions.keys())

    async def issue_id(self) -> str:
        """Draw a fresh session id that no live session holds."""
        async with self._lock:
            session_id = self._id_factory()
            while session_id in self._sessions:
                session_id = self._id_factory()
            return session_id

    async def resolve(self, session_id: str) -> Session | None:
        """Look up a live session. Never creates one."""
        async with self._lock:
            return self._sessions.get(session_id)

    async def begin(
        self,
        session_id: str | None,
        message: Any,
        opener: TransportOpener,
        transport_kind: str = "streamable-http",
    ) -> Session:
        """Create a session for an initialization request.

        A request that already carries a session id, or is not an MCP
        ``initialize`` request, is rejected with ``NoValidSessionError``.
        The session is registered only after ``opener`` returns, so a
        transport that fails mid-setup leaves nothing behind.
        """
        if session_id is not None or not is_initialize_request(message):
            raise NoValidSessionError()

        new_session_id = await self.issue_id()
        transport, cancel_scope = await opener(new_session_id)
        return await self.register(new_session_id, transport, transport_kind, cancel_scope)

    async def register(
        self,
        session_id: str,
        transport: Any,
        transport_kind: str,
        cancel_scope: anyio.CancelScope | None = None,
    ) -> Session:
        """Bind an id obtained from ``issue_id`` to its transport."""
        async with self._lock:
            if session_id in self._sessions:
                raise DuplicateSessionError(f"Session id already in use: {session_id}")
            session = Session(
                session_id=session_id,
                transport=transport,
                transport_kind=transport_kind,
                cancel_scope=cancel_scope,
            )
            self._sessions[session_id] = session

        _session_log.info(
            "session_begin session_id=%s transport=%s",
            session_id,
            transport_kind,
            extra={"session_id": session_id, "transport": transport_kind},
        )
        return session

    async def end(self, session_id: str) -> bool:
        """Remove a session and abort its work. Unknown ids are a no-op."""
        async with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        session.close()
        _session_log.info(
            "session_end session_id=%s transport=%s",
            session_id,
            session.transport_kind,
            extra={"session_id": session_id, "transport": session.transport_kind},
        )
        return True

    async def end_all(self) -> None:
        async with self._lock:
            session_ids = list(self._sessions.keys())
        for session_id in session_ids:
            await self.end(session_id)
