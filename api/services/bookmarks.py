"""Pure helpers shared by the dashboard controller and the HTTP routes."""

from __future__ import annotations

from collections.abc import Iterable

from models.schemas import Bookmark


def normalize_url(url: str) -> str:
    """Prefix ``https://`` unless the value already starts with ``http``."""
    if url.startswith("http"):
        return url
    return f"https://{url}"


def filter_bookmarks(bookmarks: Iterable[Bookmark], term: str) -> list[Bookmark]:
    """Return bookmarks whose title or URL contains *term*, ignoring case.

    Order is preserved. An empty term matches everything.
    """
    needle = term.lower()
    return [
        b for b in bookmarks
        if needle in b.title.lower() or needle in b.url.lower()
    ]
