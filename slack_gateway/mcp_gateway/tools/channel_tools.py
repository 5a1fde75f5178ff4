"""Channel tools for the Slack MCP Gateway."""

from typing import Any

from slack_gateway.mcp_gateway.tools.helpers import SlackTools, response_payload


class ChannelTools(SlackTools):
    """Public channel listing, history and management."""

    async def list_channels(self, limit: int, cursor: str | None = None) -> Any:
        """List public channels in the workspace."""
        response = await self.client.conversations_list(
            team_id=self.team_id,
            limit=limit,
            types="public_channel",
            exclude_archived=True,
            cursor=cursor,
        )
        return response_payload(response)

    async def get_channel_history(self, channel_id: str, limit: int) -> Any:
        response = await self.client.conversations_history(channel=channel_id, limit=limit)
        return response_payload(response)

    async def get_thread_replies(self, channel_id: str, thread_ts: str, limit: int) -> Any:
        response = await self.client.conversations_replies(
            channel=channel_id, ts=thread_ts, limit=limit
        )
        return response_payload(response)

    async def join_channel(self, channel_id: str) -> Any:
        response = await self.client.conversations_join(channel=channel_id)
        return response_payload(response)

    async def create_channel(self, name: str, is_private: bool = False) -> Any:
        """Create a channel; Slack rejects names with spaces or uppercase letters."""
        response = await self.client.conversations_create(
            name=name, is_private=is_private, team_id=self.team_id
        )
        return response_payload(response)

    async def rename_channel(self, channel_id: str, name: str) -> Any:
        response = await self.client.conversations_rename(channel=channel_id, name=name)
        return response_payload(response)
