"""Helper functions for Slack MCP Gateway tools."""

import re
from typing import Any, cast

from slack_sdk.web.async_client import AsyncWebClient

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Fields checked, in order, for a case-insensitive substring match
USER_MATCH_FIELDS: tuple[tuple[str, ...], ...] = (
    ("name",),
    ("display_name",),
    ("real_name",),
    ("profile", "display_name"),
    ("profile", "real_name"),
    ("profile", "email"),
)

SLACKBOT_USER_ID = "USLACKBOT"


class SlackTools:
    """Base class for tool modules bound to one invocation's Slack client."""

    def __init__(self, client: AsyncWebClient, team_id: str) -> None:
        """Initialize the tool module.

        Args:
            client: Slack Web API client built from the bot token
            team_id: Workspace the list operations are scoped to
        """
        self.client = client
        self.team_id = team_id


def response_payload(response: Any) -> Any:
    """Return the JSON body of a Slack response without reshaping it."""
    return getattr(response, "data", response)


def is_email(query: str) -> bool:
    return bool(_EMAIL_PATTERN.match(query.strip()))


def normalize_reaction(name: str) -> str:
    """``:thumbsup:`` -> ``thumbsup``"""
    return name.strip().strip(":")


def _field_value(user: dict[str, Any], path: tuple[str, ...]) -> str:
    value: Any = user
    for key in path:
        if not isinstance(value, dict):
            return ""
        value = cast(dict[str, Any], value).get(key)
    return value if isinstance(value, str) else ""


def is_active_human(user: dict[str, Any]) -> bool:
    """False for deactivated users, bots, app users and Slackbot."""
    if user.get("deleted") or user.get("is_bot") or user.get("is_app_user"):
        return False
    return user.get("id") != SLACKBOT_USER_ID


def user_matches(user: dict[str, Any], query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return False
    return any(needle in _field_value(user, path).lower() for path in USER_MATCH_FIELDS)


def filter_users(users: list[dict[str, Any]], query: str, limit: int) -> list[dict[str, Any]]:
    """First ``limit`` active human users matching ``query``, in listing order."""
    matches: list[dict[str, Any]] = []
    for user in users:
        if len(matches) >= limit:
            break
        if is_active_human(user) and user_matches(user, query):
            matches.append(user)
    return matches


def mentions_user(message: dict[str, Any], user_id: str) -> bool:
    text = message.get("text")
    return isinstance(text, str) and f"<@{user_id}>" in text
