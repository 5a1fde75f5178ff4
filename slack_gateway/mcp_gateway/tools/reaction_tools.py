"""Emoji reaction tools for the Slack MCP Gateway."""

from typing import Any

from slack_gateway.mcp_gateway.tools.helpers import (
    SlackTools,
    normalize_reaction,
    response_payload,
)


class ReactionTools(SlackTools):
    async def add_reaction(self, channel_id: str, timestamp: str, reaction: str) -> Any:
        response = await self.client.reactions_add(
            channel=channel_id, timestamp=timestamp, name=normalize_reaction(reaction)
        )
        return response_payload(response)

    async def remove_reaction(self, channel_id: str, timestamp: str, reaction: str) -> Any:
        response = await self.client.reactions_remove(
            channel=channel_id, timestamp=timestamp, name=normalize_reaction(reaction)
        )
        return response_payload(response)

    async def get_reactions(self, channel_id: str, timestamp: str) -> Any:
        response = await self.client.reactions_get(
            channel=channel_id, timestamp=timestamp, full=True
        )
        return response_payload(response)
