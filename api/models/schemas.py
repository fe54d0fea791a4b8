"""Pydantic models for Smart Bookmark."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class Bookmark(BaseModel):
    id: str
    url: str
    title: str
    created_at: datetime
    user_id: str | None = None


class BookmarkCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    url: str = Field(min_length=1, max_length=2048)

    @field_validator("title", "url")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class BookmarksListResponse(BaseModel):
    bookmarks: list[Bookmark]
    total: int
    search: str = ""


class SessionUser(BaseModel):
    """The part of a Supabase session the dashboard reads."""

    id: str
    email: str | None = None
