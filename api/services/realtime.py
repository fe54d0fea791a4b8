"""Supabase Realtime subscription for bookmark row changes.

The channel listens to every ``postgres_changes`` event on the table,
regardless of row owner.  Consumers re-fetch through RLS to get their own
rows back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from supabase import AsyncClient

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[dict[str, Any]], None]


def _log_status(status: Any, err: Exception | None = None) -> None:
    if err is not None:
        logger.warning("Realtime subscription status: %s (%s)", status, err)
    else:
        logger.info("Realtime subscription status: %s", status)


async def subscribe_to_changes(
    client: AsyncClient,
    channel_name: str,
    table: str,
    on_change: ChangeCallback,
    schema: str = "public",
):
    """Open a channel delivering every insert/update/delete on *table*.

    Returns the channel handle; pass it to :func:`unsubscribe` on teardown.
    If subscribing fails the channel is removed before the error propagates.
    """
    channel = client.channel(channel_name)
    channel.on_postgres_changes(
        event="*",
        schema=schema,
        table=table,
        callback=on_change,
    )
    try:
        await channel.subscribe(_log_status)
    except BaseException:
        logger.error("Realtime subscribe failed on channel %s", channel_name)
        await unsubscribe(client, channel)
        raise
    logger.info("Subscribed to %s.%s on channel %s", schema, table, channel_name)
    return channel


async def unsubscribe(client: AsyncClient, channel) -> None:
    """Remove *channel*.  Never raises, so teardown always completes."""
    try:
        await client.remove_channel(channel)
        logger.info("Realtime channel removed")
    except Exception as exc:
        logger.warning("Failed to remove realtime channel: %s", exc)
