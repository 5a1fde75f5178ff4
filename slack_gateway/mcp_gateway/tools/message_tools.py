"""Message posting and mention tools for the Slack MCP Gateway."""

from typing import Any, cast

from slack_gateway.mcp_gateway.tools.helpers import SlackTools, mentions_user, response_payload


class MessageTools(SlackTools):
    """Posting, thread replies and self-mention scans."""

    async def post_message(self, channel_id: str, text: str) -> Any:
        response = await self.client.chat_postMessage(channel=channel_id, text=text)
        return response_payload(response)

    async def reply_to_thread(self, channel_id: str, thread_ts: str, text: str) -> Any:
        response = await self.client.chat_postMessage(
            channel=channel_id, thread_ts=thread_ts, text=text
        )
        return response_payload(response)

    async def get_mentions(self, channel_id: str, limit: int) -> dict[str, Any]:
        """Scan recent channel history for messages mentioning the bot user.

        Resolves the bot's own user id with ``auth.test`` first; the history
        fetch only happens if that succeeds.
        """
        identity = await self.client.auth_test()
        user_id = identity.get("user_id")
        if not user_id:
            raise RuntimeError("auth.test did not return a user_id")

        response = await self.client.conversations_history(channel=channel_id, limit=limit)
        messages = cast(list[dict[str, Any]], response.get("messages") or [])
        mentions = [message for message in messages if mentions_user(message, user_id)]
        return {
            "user_id": user_id,
            "channel_id": channel_id,
            "count": len(mentions),
            "messages": mentions,
        }
