"""Bookmark dashboard controller.

Owns the view state of one signed-in dashboard session and keeps it in
sync with the Supabase ``bookmarks`` table:

- on mount, checks for a session (redirecting to login if there is none),
  fetches the list and opens a realtime subscription
- add / delete / sign-out go straight to Supabase
- every realtime notification triggers a full re-fetch

Local state is never patched in place.  The list shown is always whatever
the last fetch returned, so an action's own reconciling fetch and the
notification-triggered fetch may race; the last response wins.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import AsyncClient

from core.config import settings
from models.schemas import Bookmark, SessionUser
from services.bookmarks import filter_bookmarks, normalize_url
from services.realtime import subscribe_to_changes, unsubscribe

logger = logging.getLogger(__name__)


def _error_message(exc: Exception) -> str:
    """User-facing text for a failed store call."""
    if isinstance(exc, APIError) and exc.message:
        return exc.message
    return str(exc)


@dataclass
class DashboardContext:
    """Everything the controller talks to, passed in explicitly."""

    client: AsyncClient
    navigate: Callable[[str], None]
    alert: Callable[[str], None]
    table: str = field(default_factory=lambda: settings.bookmarks_table)
    channel_name: str = field(default_factory=lambda: settings.realtime_channel)
    login_path: str = field(default_factory=lambda: settings.login_path)


@dataclass
class DashboardState:
    """Snapshot handed to the presentation layer."""

    user: SessionUser | None
    bookmarks: list[Bookmark]
    search_term: str
    loading: bool
    adding: bool
    draft_title: str
    draft_url: str

    @property
    def filtered_bookmarks(self) -> list[Bookmark]:
        return filter_bookmarks(self.bookmarks, self.search_term)


class BookmarkDashboard:
    """View state controller for a single dashboard session.

    Use as an async context manager so the realtime subscription is
    released on every exit path::

        async with BookmarkDashboard(context) as dashboard:
            ...
    """

    def __init__(
        self,
        context: DashboardContext,
        on_state_change: Callable[[DashboardState], None] | None = None,
    ) -> None:
        self._ctx = context
        self._on_state_change = on_state_change

        self.user: SessionUser | None = None
        self.bookmarks: list[Bookmark] = []
        self.search_term = ""
        self.loading = True
        self.adding = False
        self.draft_title = ""
        self.draft_url = ""

        self._channel = None
        self._refresh_tasks: set[asyncio.Task] = set()
        self._unmounted = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> BookmarkDashboard:
        try:
            await self.mount()
        except BaseException:
            await self.unmount()
            raise
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.unmount()

    async def mount(self) -> bool:
        """Gate on the current session, then subscribe and load.

        The subscription is opened before the initial fetch so a change
        landing while the fetch is in flight still triggers a refresh.

        Returns ``False`` (after navigating to the login page) when nobody
        is signed in; nothing else is set up in that case.
        """
        try:
            session = await self._ctx.client.auth.get_session()
        except Exception as exc:
            logger.warning("Session lookup failed: %s", exc)
            session = None

        if session is None:
            logger.info("No session, redirecting to %s", self._ctx.login_path)
            self._ctx.navigate(self._ctx.login_path)
            return False

        self.user = SessionUser(id=session.user.id, email=session.user.email)
        logger.info("Dashboard mounted for user %s", self.user.id)
        self._emit()

        self._channel = await subscribe_to_changes(
            self._ctx.client,
            self._ctx.channel_name,
            self._ctx.table,
            self._on_realtime_change,
        )
        await self.fetch_bookmarks()
        return True

    async def unmount(self) -> None:
        """Drop pending realtime refreshes and release the subscription.

        No state is emitted after this point.
        """
        self._unmounted = True
        tasks = list(self._refresh_tasks)
        for task in tasks:
            task.cancel()
        self._refresh_tasks.clear()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        if self._channel is not None:
            channel, self._channel = self._channel, None
            await unsubscribe(self._ctx.client, channel)

    @property
    def subscribed(self) -> bool:
        return self._channel is not None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> DashboardState:
        return DashboardState(
            user=self.user,
            bookmarks=list(self.bookmarks),
            search_term=self.search_term,
            loading=self.loading,
            adding=self.adding,
            draft_title=self.draft_title,
            draft_url=self.draft_url,
        )

    @property
    def filtered_bookmarks(self) -> list[Bookmark]:
        return filter_bookmarks(self.bookmarks, self.search_term)

    def set_search_term(self, term: str) -> None:
        self.search_term = term
        self._emit()

    def _emit(self) -> None:
        if self._on_state_change is not None and not self._unmounted:
            self._on_state_change(self.state)

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def fetch_bookmarks(self) -> None:
        """Replace the list with a fresh copy from Supabase.

        RLS limits the rows to the signed-in user.  On failure the previous
        list is kept.  ``loading`` is cleared either way.
        """
        try:
            response = await (
                self._ctx.client.table(self._ctx.table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            if response.data is not None:
                self.bookmarks = [Bookmark.model_validate(row) for row in response.data]
        except (APIError, ValidationError) as exc:
            logger.warning("Bookmark fetch failed, keeping previous list: %s", exc)
        except Exception as exc:
            logger.warning("Bookmark fetch transport error, keeping previous list: %s", exc)
        finally:
            self.loading = False
            self._emit()

    async def add_bookmark(
        self, title: str | None = None, url: str | None = None
    ) -> bool:
        """Insert a bookmark from the draft fields.

        *title* and *url*, when given, replace the draft values.  If either
        ends up empty nothing happens.  Returns ``True`` when the insert went
        through.
        """
        title = self.draft_title if title is None else title
        url = self.draft_url if url is None else url
        if not title or not url:
            return False

        self.draft_title = title
        self.draft_url = url
        self.adding = True
        self._emit()
        try:
            record = {
                "url": normalize_url(self.draft_url),
                "title": self.draft_title,
                "user_id": self.user.id if self.user else None,
            }
            try:
                await self._ctx.client.table(self._ctx.table).insert([record]).execute()
            except Exception as exc:
                logger.error("Error adding bookmark: %s", exc)
                self._ctx.alert(_error_message(exc))
                return False

            self.draft_title = ""
            self.draft_url = ""
            # Our own insert also comes back as a notification, but fetch now
            # so this session updates without waiting on the feed.
            await self.fetch_bookmarks()
            return True
        finally:
            self.adding = False
            self._emit()

    async def delete_bookmark(self, bookmark_id: str) -> None:
        """Delete by id.  The list updates when the notification arrives."""
        try:
            await (
                self._ctx.client.table(self._ctx.table)
                .delete()
                .eq("id", bookmark_id)
                .execute()
            )
        except Exception as exc:
            logger.warning("Failed to delete bookmark %s: %s", bookmark_id, exc)

    async def sign_out(self) -> None:
        """Sign out and go to the login page, whether or not sign-out worked."""
        try:
            await self._ctx.client.auth.sign_out()
        except Exception as exc:
            logger.warning("Sign-out failed: %s", exc)
        self._ctx.navigate(self._ctx.login_path)

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    async def handle_change(self, notification: dict[str, Any]) -> None:
        """Re-fetch on any change notification.  No diffing."""
        logger.info("Realtime change received: %s", notification)
        await self.fetch_bookmarks()

    def _on_realtime_change(self, notification: dict[str, Any]) -> None:
        if self._unmounted:
            return
        task = asyncio.get_running_loop().create_task(self.handle_change(notification))
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)
