"""MCP Gateway tool modules."""

from slack_gateway.mcp_gateway.tools.canvas_tools import CanvasTools
from slack_gateway.mcp_gateway.tools.channel_tools import ChannelTools
from slack_gateway.mcp_gateway.tools.dm_tools import DirectMessageTools
from slack_gateway.mcp_gateway.tools.helpers import SlackTools
from slack_gateway.mcp_gateway.tools.message_tools import MessageTools
from slack_gateway.mcp_gateway.tools.reaction_tools import ReactionTools
from slack_gateway.mcp_gateway.tools.user_tools import UserTools

TOOL_MODULES: tuple[type[SlackTools], ...] = (
    ChannelTools,
    MessageTools,
    DirectMessageTools,
    UserTools,
    ReactionTools,
    CanvasTools,
)

__all__ = [
    "SlackTools",
    "ChannelTools",
    "MessageTools",
    "DirectMessageTools",
    "UserTools",
    "ReactionTools",
    "CanvasTools",
    "TOOL_MODULES",
]
