"""Bookmark endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from postgrest.exceptions import APIError
from pydantic import ValidationError

from core.auth import AuthenticatedUser, get_current_user
from models.schemas import Bookmark, BookmarkCreate, BookmarksListResponse
from services.bookmarks import filter_bookmarks
from services.database import create_bookmark, delete_bookmark, list_bookmarks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookmarks", tags=["bookmarks"])


@router.get("", response_model=BookmarksListResponse)
async def get_bookmarks(
    search: str = Query(""),
    user: AuthenticatedUser = Depends(get_current_user),
) -> BookmarksListResponse:
    """List the user's bookmarks, newest first, optionally filtered."""
    rows = list_bookmarks(access_token=user.access_token)
    try:
        parsed = [Bookmark.model_validate(row) for row in rows]
    except ValidationError as exc:
        # Same as a failed fetch: degrade to an empty list, no error status.
        logger.warning("Invalid bookmark row for %s: %s", user.user_id, exc)
        parsed = []
    bookmarks = filter_bookmarks(parsed, search)
    return BookmarksListResponse(
        bookmarks=bookmarks,
        total=len(bookmarks),
        search=search,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_bookmark(
    body: BookmarkCreate,
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Create a bookmark.  Scheme-less URLs get ``https://``."""
    try:
        row = create_bookmark(
            title=body.title,
            url=body.url,
            user_id=user.user_id,
            access_token=user.access_token,
        )
    except APIError as exc:
        logger.error("Error adding bookmark for %s: %s", user.user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.message or "Failed to add bookmark",
        ) from exc
    return {"bookmark": row}


@router.delete("/{bookmark_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_bookmark(
    bookmark_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
) -> None:
    """Remove a bookmark.  Always 204; unknown ids are not an error."""
    delete_bookmark(bookmark_id=bookmark_id, access_token=user.access_token)
