"""Slack MCP Gateway - tool catalog, dispatcher and HTTP transports."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from slack_gateway.mcp_gateway.dispatcher import ToolDispatcher
    from slack_gateway.mcp_gateway.session import SessionRegistry


def __getattr__(name: str) -> Any:
    if name == "ToolDispatcher":
        from slack_gateway.mcp_gateway.dispatcher import ToolDispatcher

        return ToolDispatcher
    if name == "SessionRegistry":
        from slack_gateway.mcp_gateway.session import SessionRegistry

        return SessionRegistry
    raise AttributeError(f"module 'slack_gateway.mcp_gateway' has no attribute '{name}'")


__all__ = ["ToolDispatcher", "SessionRegistry"]
