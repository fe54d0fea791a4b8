"""Tests for the terminal dashboard's parsing, rendering and command dispatch."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from cli.dashboard import parse_command, render_state, run_command
from models.schemas import Bookmark, SessionUser
from services.dashboard import DashboardState


def _state(bookmarks=(), **overrides) -> DashboardState:
    data = {
        "user": SessionUser(id="u1", email="me@example.com"),
        "bookmarks": list(bookmarks),
        "search_term": "",
        "loading": False,
        "adding": False,
        "draft_title": "",
        "draft_url": "",
    }
    data.update(overrides)
    return DashboardState(**data)


class TestParseCommand:
    def test_blank(self):
        assert parse_command("   ") == ("", [])

    def test_add(self):
        assert parse_command("add Rust Book | doc.rust-lang.org/book") == (
            "add", ["Rust Book", "doc.rust-lang.org/book"]
        )

    def test_add_title_with_pipe(self):
        assert parse_command("add a|b | c.com") == ("add", ["a|b", "c.com"])

    def test_add_without_url(self):
        assert parse_command("add Just a title") == ("add", ["Just a title", ""])

    def test_command_is_case_insensitive(self):
        assert parse_command("RM 2") == ("rm", ["2"])

    def test_search_keeps_spaces(self):
        assert parse_command("search rust  book") == ("search", ["rust  book"])

    def test_search_without_term(self):
        assert parse_command("search") == ("search", [])


class TestRenderState:
    def test_loading(self):
        assert render_state(_state(loading=True)) == "Loading..."

    def test_empty(self):
        out = render_state(_state())
        assert "me@example.com" in out
        assert "No bookmarks found" in out

    def test_lists_filtered_view(self, make_bookmark_data):
        bookmarks = [
            Bookmark(**make_bookmark_data(id="2", title="Python", url="https://python.org")),
            Bookmark(**make_bookmark_data(id="1")),
        ]
        out = render_state(_state(bookmarks, search_term="py"))

        assert "Search: py" in out
        assert "1. Python  <https://python.org>" in out
        assert "Docs" not in out

    def test_adding_indicator(self):
        assert "Adding..." in render_state(_state(adding=True))


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_add_store_failure_prints_no_usage(self, capsys):
        dashboard = MagicMock()
        dashboard.add_bookmark = AsyncMock(return_value=False)

        assert await run_command(dashboard, "add", ["Docs", "docs.rs"]) is True

        dashboard.add_bookmark.assert_awaited_once_with("Docs", "docs.rs")
        assert "Usage" not in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_add_missing_url_prints_usage(self, capsys):
        dashboard = MagicMock()
        dashboard.add_bookmark = AsyncMock()

        await run_command(dashboard, *parse_command("add Just a title"))

        dashboard.add_bookmark.assert_not_called()
        assert "Usage: add <title> | <url>" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_rm_bad_index(self, capsys):
        dashboard = MagicMock()
        dashboard.filtered_bookmarks = []
        dashboard.delete_bookmark = AsyncMock()

        await run_command(dashboard, "rm", ["3"])

        dashboard.delete_bookmark.assert_not_called()
        assert "Usage: rm <n>" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_quit_stops_loop(self):
        assert await run_command(MagicMock(), "quit", []) is False
