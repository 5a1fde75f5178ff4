"""Direct message tools for the Slack MCP Gateway."""

from typing import Any

from slack_gateway.mcp_gateway.tools.helpers import SlackTools, response_payload


class DirectMessageTools(SlackTools):
    """Direct message conversations with individual users."""

    async def list_dms(self, limit: int) -> Any:
        response = await self.client.conversations_list(
            team_id=self.team_id, limit=limit, types="im"
        )
        return response_payload(response)

    async def get_dm_history(self, channel_id: str, limit: int) -> Any:
        response = await self.client.conversations_history(channel=channel_id, limit=limit)
        return response_payload(response)

    async def open_dm(self, user_id: str) -> Any:
        """Open a DM channel with ``user_id``; Slack returns the existing one if present."""
        response = await self.client.conversations_open(users=user_id)
        return response_payload(response)

    async def send_dm(self, user_id: str, text: str) -> Any:
        """Open (or reuse) the DM channel, then post into it.

        A failure opening the channel propagates unchanged and nothing is posted.
        """
        opened = await self.client.conversations_open(users=user_id)
        channel = opened.get("channel") or {}
        channel_id = channel.get("id")
        if not channel_id:
            raise RuntimeError(f"conversations.open returned no channel for user {user_id}")

        response = await self.client.chat_postMessage(channel=channel_id, text=text)
        return response_payload(response)
