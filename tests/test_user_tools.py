"""Tests for slack_find_user search and the user-matching helpers."""

import asyncio
from typing import Any

from fake_slack import FakeSlackClient, TEST_CREDENTIALS, make_dispatcher

from slack_gateway.mcp_gateway.tools.helpers import filter_users, is_active_human, is_email
from slack_gateway.mcp_gateway.tools.user_tools import UserTools

MEMBERS: list[dict[str, Any]] = [
    {"id": "U1", "name": "ana.old", "real_name": "Ana Old", "deleted": True},
    {"id": "U2", "name": "anabot", "real_name": "Ana Bot", "is_bot": True},
    {"id": "U3", "name": "ana.lee", "real_name": "Ana Lee", "profile": {"email": "ana@x.io"}},
    {"id": "U4", "name": "bo", "profile": {"display_name": "Banana Fan"}},
    {"id": "USLACKBOT", "name": "slackbot", "real_name": "Slackbot"},
    {"id": "U5", "name": "carol", "profile": {"real_name": "Carol Diaz"}},
]


def _find(client: FakeSlackClient, query: str, limit: int = 5) -> dict[str, Any]:
    tools = UserTools(client, TEST_CREDENTIALS.team_id)  # type: ignore[arg-type]
    return asyncio.run(tools.find_user(query=query, limit=limit))


class TestFindUser:
    def test_skips_deactivated_and_bot_users(self) -> None:
        client = FakeSlackClient(responses={"users_list": {"ok": True, "members": MEMBERS}})

        result = _find(client, "ana", limit=1)

        assert result["count"] == 1
        assert [user["id"] for user in result["users"]] == ["U3"]
        assert result["users"][0]["real_name"] == "Ana Lee"

    def test_keeps_listing_order_and_limit(self) -> None:
        client = FakeSlackClient(responses={"users_list": {"ok": True, "members": MEMBERS}})

        assert [u["id"] for u in _find(client, "ANA")["users"]] == ["U3", "U4"]
        assert [u["id"] for u in _find(client, "ana", limit=1)["users"]] == ["U3"]

    def test_name_query_stops_when_listing_ends(self) -> None:
        page = {"ok": True, "members": [], "response_metadata": {"next_cursor": ""}}
        client = FakeSlackClient(responses={"users_list": page})

        result = _find(client, "  nobody ")

        assert result == {"query": "nobody", "count": 0, "users": []}
        expected = {"team_id": TEST_CREDENTIALS.team_id, "limit": 1000, "cursor": None}
        assert client.calls == [("users_list", expected)]

    def test_follows_cursor_to_later_pages(self) -> None:
        pages = [
            {"ok": True, "members": MEMBERS[:2], "response_metadata": {"next_cursor": "c2"}},
            {"ok": True, "members": MEMBERS[2:4], "response_metadata": {"next_cursor": "c3"}},
            {"ok": True, "members": MEMBERS[4:], "response_metadata": {"next_cursor": ""}},
        ]
        client = FakeSlackClient(responses={"users_list": pages})

        result = _find(client, "ana", limit=5)

        assert [user["id"] for user in result["users"]] == ["U3", "U4"]
        assert [kwargs["cursor"] for _, kwargs in client.calls] == [None, "c2", "c3"]

    def test_stops_paging_once_limit_reached(self) -> None:
        pages = [
            {"ok": True, "members": MEMBERS[:3], "response_metadata": {"next_cursor": "c2"}},
            {"ok": True, "members": MEMBERS[3:], "response_metadata": {"next_cursor": ""}},
        ]
        client = FakeSlackClient(responses={"users_list": pages})

        result = _find(client, "ana", limit=1)

        assert [user["id"] for user in result["users"]] == ["U3"]
        assert len(client.calls) == 1

    def test_email_query_uses_lookup(self) -> None:
        client = FakeSlackClient(
            responses={"users_lookupByEmail": {"ok": True, "user": MEMBERS[2]}}
        )

        result = _find(client, "ana@x.io")

        assert client.call_names == ["users_lookupByEmail"]
        assert result["users"] == [MEMBERS[2]]

    def test_email_lookup_of_bot_matches_nothing(self) -> None:
        bot = {"id": "UB", "is_bot": True, "profile": {"email": "bot@x.io"}}
        client = FakeSlackClient(responses={"users_lookupByEmail": {"ok": True, "user": bot}})

        assert _find(client, "bot@x.io")["count"] == 0

    def test_through_dispatcher_uses_default_limit(self) -> None:
        many = [{"id": f"U{i}", "name": f"sam{i}"} for i in range(10)]
        client = FakeSlackClient(responses={"users_list": {"ok": True, "members": many}})

        result = asyncio.run(make_dispatcher(client).dispatch("slack_find_user", {"query": "sam"}))

        assert result.success is True
        assert result.content["count"] == 5


class TestUserHelpers:
    def test_is_email(self) -> None:
        assert is_email("ana@x.io") is True
        assert is_email("ana") is False
        assert is_email("ana@localhost") is False

    def test_is_active_human(self) -> None:
        assert is_active_human(MEMBERS[2]) is True
        assert is_active_human({"id": "UA", "is_app_user": True}) is False
        assert is_active_human({"id": "USLACKBOT"}) is False

    def test_blank_query_matches_nothing(self) -> None:
        assert filter_users(MEMBERS, "   ", 10) == []
