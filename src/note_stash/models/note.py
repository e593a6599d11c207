"""SQLAlchemy model for user notes."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from note_stash.db.session import Base
from note_stash.db.time import as_utc, utcnow

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 10_000
# Largest value a signed 64-bit INTEGER column or LIMIT/OFFSET can hold.
SQL_INTEGER_MAX = 2**63 - 1


class Note(Base):
    """A note owned by exactly one user.

    A note is only active while ``expires_at`` is empty or still in the future.
    Expired notes stay in the table until their owner deletes them.
    """

    __tablename__ = "notes"
    __table_args__ = (Index("ix_notes_username_created_at", "username", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Ownership never changes after creation.
    username: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.username", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def is_active(self, now: datetime) -> bool:
        """Return True if the note is visible at ``now``."""
        return self.expires_at is None or as_utc(self.expires_at) > now
