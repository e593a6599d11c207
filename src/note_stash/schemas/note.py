"""Note-related Pydantic schemas."""

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from note_stash.db.time import as_utc, utcnow
from note_stash.models.note import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH

from .common import CamelModel


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    title: str = Field(..., description="Note title")
    content: str = Field(..., description="Note body")
    expires_at: datetime | None = Field(
        None,
        description="Optional expiry; naive values are read as UTC",
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError("Title must not exceed 255 characters.")
        return v

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        if len(v) > CONTENT_MAX_LENGTH:
            raise ValueError("Content must not exceed 10000 characters.")
        return v

    @field_validator("expires_at")
    @classmethod
    def validate_expires_at(cls, v: datetime | None) -> datetime | None:
        """Reject expiry timestamps that are not in the future."""
        if v is None:
            return v
        try:
            v = as_utc(v)
        except OverflowError as err:
            raise ValueError("Expiration date and time is out of range.") from err
        if v <= utcnow():
            raise ValueError("Expiration date and time must be in the future.")
        return v


class NoteUpdate(NoteCreate):
    """Schema for replacing a note's title, content and expiry."""


class NoteResponse(CamelModel):
    """Schema for note information returned by the API."""

    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    expires_at: datetime | None = None

    @field_validator("created_at", "updated_at", "expires_at")
    @classmethod
    def _ensure_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    model_config = ConfigDict(from_attributes=True)
