"""Tool catalog advertised by the Slack MCP Gateway."""

from typing import Any

from slack_gateway.mcp_gateway.constants import (
    DEFAULT_CHANNEL_LIST_LIMIT,
    DEFAULT_FIND_USER_LIMIT,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_MENTIONS_SCAN_LIMIT,
    DEFAULT_THREAD_REPLIES_LIMIT,
    DEFAULT_USER_LIST_LIMIT,
    MAX_LIST_LIMIT,
    MIN_LIST_LIMIT,
)

TOOL_NAME_PREFIX = "slack_"


def _limit(description: str, default: int) -> dict[str, Any]:
    return {
        "type": "integer",
        "description": description,
        "default": default,
        "minimum": MIN_LIST_LIMIT,
        "maximum": MAX_LIST_LIMIT,
    }


_CHANNEL_ID = {"type": "string", "description": "Channel ID"}
_USER_ID = {"type": "string", "description": "User ID (e.g. U0123ABCD)"}
_MESSAGE_TS = {"type": "string", "description": "Message timestamp (ts) identifying the message"}
_REACTION = {"type": "string", "description": "Emoji name, with or without colons"}
_CANVAS_ID = {"type": "string", "description": "Canvas ID (file ID, e.g. F0123ABCD)"}
_CURSOR = {"type": "string", "description": "Pagination cursor from a previous response"}

_TOOL_SPECS: list[dict[str, Any]] = [
    {
        "name": "slack_list_channels",
        "description": "List public channels in the workspace",
        "input_schema": {
            "type": "object",
            "properties": {
                "limit": _limit("Maximum number of channels", DEFAULT_CHANNEL_LIST_LIMIT),
                "cursor": _CURSOR,
            },
        },
    },
    {
        "name": "slack_post_message",
        "description": "Post a message to a Slack channel",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": _CHANNEL_ID,
                "text": {"type": "string", "description": "Message text"},
            },
            "required": ["channel_id", "text"],
        },
    },
    {
        "name": "slack_reply_to_thread",
        "description": "Reply to a message thread in a Slack channel",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": _CHANNEL_ID,
                "thread_ts": {"type": "string", "description": "Timestamp of the parent message"},
                "text": {"type": "string", "description": "Reply text"},
            },
            "required": ["channel_id", "thread_ts", "text"],
        },
    },
    {
        "name": "slack_get_channel_history",
        "description": "Get recent messages from a channel",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": _CHANNEL_ID,
                "limit": _limit("Number of messages", DEFAULT_HISTORY_LIMIT),
            },
            "required": ["channel_id"],
        },
    },
    {
        "name": "slack_get_thread_replies",
        "description": "Get all replies in a message thread",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": _CHANNEL_ID,
                "thread_ts": {"type": "string", "description": "Timestamp of the parent message"},
                "limit": _limit("Number of replies", DEFAULT_THREAD_REPLIES_LIMIT),
            },
            "required": ["channel_id", "thread_ts"],
        },
    },
    {
        "name": "slack_join_channel",
        "description": "Join a public channel as the bot user",
        "input_schema": {
            "type": "object",
            "properties": {"channel_id": _CHANNEL_ID},
            "required": ["channel_id"],
        },
    },
    {
        "name": "slack_create_channel",
        "description": "Create a new channel in the workspace",
        "input_schema": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Channel name (lowercase, no spaces or periods)",
                },
                "is_private": {
                    "type": "boolean",
                    "description": "Create a private channel",
                    "default": False,
                },
            },
            "required": ["name"],
        },
    },
    {
        "name": "slack_rename_channel",
        "description": "Rename an existing channel",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": _CHANNEL_ID,
                "name": {"type": "string", "description": "New channel name"},
            },
            "required": ["channel_id", "name"],
        },
    },
    {
        "name": "slack_list_dms",
        "description": "List direct message conversations the bot is part of",
        "input_schema": {
            "type": "object",
            "properties": {
                "limit": _limit("Maximum number of conversations", DEFAULT_CHANNEL_LIST_LIMIT),
            },
        },
    },
    {
        "name": "slack_get_dm_history",
        "description": "Get recent messages from a direct message conversation",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": {"type": "string", "description": "DM channel ID (D...)"},
                "limit": _limit("Number of messages", DEFAULT_HISTORY_LIMIT),
            },
            "required": ["channel_id"],
        },
    },
    {
        "name": "slack_get_users",
        "description": "List users in the workspace with basic profile information",
        "input_schema": {
            "type": "object",
            "properties": {
                "limit": _limit("Maximum number of users", DEFAULT_USER_LIST_LIMIT),
                "cursor": _CURSOR,
            },
        },
    },
    {
        "name": "slack_find_user",
        "description": (
            "Find active users by email address, or by a case-insensitive match on "
            "handle, display name or real name across all workspace members"
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Email address or name fragment"},
                "limit": _limit("Maximum number of matches", DEFAULT_FIND_USER_LIMIT),
            },
            "required": ["query"],
        },
    },
    {
        "name": "slack_get_user_info",
        "description": "Get account information for a user",
        "input_schema": {
            "type": "object",
            "properties": {"user_id": _USER_ID},
            "required": ["user_id"],
        },
    },
    {
        "name": "slack_get_user_profile",
        "description": "Get detailed profile information for a user",
        "input_schema": {
            "type": "object",
            "properties": {"user_id": _USER_ID},
            "required": ["user_id"],
        },
    },
    {
        "name": "slack_open_dm",
        "description": "Open a direct message channel with a user, or return the existing one",
        "input_schema": {
            "type": "object",
            "properties": {"user_id": _USER_ID},
            "required": ["user_id"],
        },
    },
    {
        "name": "slack_send_dm",
        "description": "Send a direct message to a user",
        "input_schema": {
            "type": "object",
            "properties": {
                "user_id": _USER_ID,
                "text": {"type": "string", "description": "Message text"},
            },
            "required": ["user_id", "text"],
        },
    },
    {
        "name": "slack_get_mentions",
        "description": "Find recent messages in a channel that mention the bot user",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": _CHANNEL_ID,
                "limit": _limit("Number of recent messages to scan", DEFAULT_MENTIONS_SCAN_LIMIT),
            },
            "required": ["channel_id"],
        },
    },
    {
        "name": "slack_add_reaction",
        "description": "Add an emoji reaction to a message",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": _CHANNEL_ID,
                "timestamp": _MESSAGE_TS,
                "reaction": _REACTION,
            },
            "required": ["channel_id", "timestamp", "reaction"],
        },
    },
    {
        "name": "slack_remove_reaction",
        "description": "Remove an emoji reaction the bot added to a message",
        "input_schema": {
            "type": "object",
            "properties": {
                "channel_id": _CHANNEL_ID,
                "timestamp": _MESSAGE_TS,
                "reaction": _REACTION,
            },
            "required": ["channel_id", "timestamp", "reaction"],
        },
    },
    {
        "name": "slack_get_reactions",
        "description": "Get the reactions on a message",
        "input_schema": {
            "type": "object",
            "properties": {"channel_id": _CHANNEL_ID, "timestamp": _MESSAGE_TS},
            "required": ["channel_id", "timestamp"],
        },
    },
    {
        "name": "slack_create_canvas",
        "description": "Create a standalone canvas, optionally with markdown content",
        "input_schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string", "description": "Canvas title"},
                "markdown": {"type": "string", "description": "Initial canvas content"},
            },
            "required": ["title"],
        },
    },
    {
        "name": "slack_get_canvas",
        "description": "Get a canvas file's metadata and content",
        "input_schema": {
            "type": "object",
            "properties": {"canvas_id": _CANVAS_ID},
            "required": ["canvas_id"],
        },
    },
    {
        "name": "slack_edit_canvas",
        "description": "Edit a canvas by inserting or replacing markdown content",
        "input_schema": {
            "type": "object",
            "properties": {
                "canvas_id": _CANVAS_ID,
                "markdown": {"type": "string", "description": "Markdown content to apply"},
                "operation": {
                    "type": "string",
                    "description": "Edit operation",
                    "enum": ["insert_at_end", "insert_at_start", "replace"],
                    "default": "insert_at_end",
                },
            },
            "required": ["canvas_id", "markdown"],
        },
    },
    {
        "name": "slack_set_canvas_access",
        "description": "Set the access level of channels or users to a canvas",
        "input_schema": {
            "type": "object",
            "properties": {
                "canvas_id": _CANVAS_ID,
                "access_level": {
                    "type": "string",
                    "description": "Access level to grant",
                    "enum": ["read", "write"],
                },
                "channel_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Channels to grant access to",
                },
                "user_ids": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Users to grant access to",
                },
            },
            "required": ["canvas_id", "access_level"],
        },
    },
    {
        "name": "slack_delete_canvas",
        "description": "Delete a canvas",
        "input_schema": {
            "type": "object",
            "properties": {"canvas_id": _CANVAS_ID},
            "required": ["canvas_id"],
        },
    },
]

TOOL_SPECS: list[dict[str, Any]] = _TOOL_SPECS


def tool_method_name(tool_name: str) -> str:
    """Map a published tool name to the tool-module method implementing it."""
    if not tool_name.startswith(TOOL_NAME_PREFIX):
        raise ValueError(f"Unsupported tool prefix: {tool_name}")
    return tool_name.removeprefix(TOOL_NAME_PREFIX)
