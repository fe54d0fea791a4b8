"""Supabase database operations for Smart Bookmark."""

from __future__ import annotations

import logging

from postgrest.exceptions import APIError
from supabase import AsyncClient, Client, acreate_client, create_client
from supabase.lib.client_options import AsyncClientOptions, SyncClientOptions

from core.config import settings
from services.bookmarks import normalize_url

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Client helpers
# ---------------------------------------------------------------------------

def get_supabase_client(access_token: str | None = None) -> Client:
    """Create a Supabase client.

    If *access_token* is provided the client's Authorization header is set to
    the user's JWT so that Row-Level Security policies are evaluated in the
    context of the authenticated user.  Otherwise the service-role key is used
    which bypasses RLS entirely (only used to verify tokens).
    """
    if access_token:
        options = SyncClientOptions(
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return create_client(settings.supabase_url, settings.supabase_anon_key, options)
    else:
        key = settings.supabase_service_key or settings.supabase_anon_key
        return create_client(settings.supabase_url, key)


async def get_async_supabase_client(access_token: str | None = None) -> AsyncClient:
    """Create an async Supabase client.

    Realtime channels are only available on the async client, so the
    dashboard controller always works against one of these.  The anon key is
    used either way: a dashboard must see the store through RLS.
    """
    if access_token:
        options = AsyncClientOptions(
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return await acreate_client(
            settings.supabase_url, settings.supabase_anon_key, options
        )
    return await acreate_client(settings.supabase_url, settings.supabase_anon_key)


# ---------------------------------------------------------------------------
# Bookmarks
# ---------------------------------------------------------------------------

def list_bookmarks(access_token: str) -> list[dict]:
    """Return the user's bookmarks, newest first.

    No explicit ``user_id`` filter: RLS scopes the rows to the owner of
    *access_token*.
    """
    client = get_supabase_client(access_token)

    try:
        response = (
            client.table(settings.bookmarks_table)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return response.data
    except APIError as exc:
        logger.error("Failed to fetch bookmarks: %s", exc)
        return []


def create_bookmark(title: str, url: str, user_id: str, access_token: str) -> dict:
    """Insert a bookmark and return the created row.

    Store errors propagate so the caller can report them.
    """
    client = get_supabase_client(access_token)

    payload = {
        "url": normalize_url(url),
        "title": title,
        "user_id": user_id,
    }
    response = client.table(settings.bookmarks_table).insert(payload).execute()
    return response.data[0] if response.data else {}


def delete_bookmark(bookmark_id: str, access_token: str) -> None:
    """Delete a bookmark by id.  Failures are logged, not raised."""
    client = get_supabase_client(access_token)

    try:
        client.table(settings.bookmarks_table).delete().eq("id", bookmark_id).execute()
    except APIError as exc:
        logger.warning("Failed to delete bookmark %s: %s", bookmark_id, exc)
