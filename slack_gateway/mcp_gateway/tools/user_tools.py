"""User lookup tools for the Slack MCP Gateway."""

from typing import Any, cast

from slack_gateway.mcp_gateway.constants import USER_SEARCH_PAGE_SIZE
from slack_gateway.mcp_gateway.tools.helpers import (
    SlackTools,
    filter_users,
    is_email,
    response_payload,
)


class UserTools(SlackTools):
    """Workspace user listing, search and profiles."""

    async def get_users(self, limit: int, cursor: str | None = None) -> Any:
        response = await self.client.users_list(team_id=self.team_id, limit=limit, cursor=cursor)
        return response_payload(response)

    async def find_user(self, query: str, limit: int) -> dict[str, Any]:
        """Find active, non-bot users by email or by fuzzy name match.

        An email-shaped query goes to ``users.lookupByEmail``; anything else
        pages through ``users.list`` until ``limit`` matches are found or the
        listing ends, keeping matches in listing order.
        """
        query = query.strip()
        if is_email(query):
            response = await self.client.users_lookupByEmail(email=query)
            candidates = [cast(dict[str, Any], response.get("user") or {})]
            matches = filter_users(candidates, query, limit)
        else:
            matches = await self._search_members(query, limit)

        return {"query": query, "count": len(matches), "users": matches}

    async def _search_members(self, query: str, limit: int) -> list[dict[str, Any]]:
        matches: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            response = await self.client.users_list(
                team_id=self.team_id, limit=USER_SEARCH_PAGE_SIZE, cursor=cursor
            )
            members = cast(list[dict[str, Any]], response.get("members") or [])
            matches.extend(filter_users(members, query, limit - len(matches)))

            metadata = cast(dict[str, Any], response.get("response_metadata") or {})
            cursor = metadata.get("next_cursor") or None
            if len(matches) >= limit or cursor is None:
                return matches

    async def get_user_info(self, user_id: str) -> Any:
        response = await self.client.users_info(user=user_id)
        return response_payload(response)

    async def get_user_profile(self, user_id: str) -> Any:
        response = await self.client.users_profile_get(user=user_id, include_labels=True)
        return response_payload(response)
