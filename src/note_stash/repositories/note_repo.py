"""Data access helpers for working with notes."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import ColumnElement, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from note_stash.core.errors import DependencyFailure
from note_stash.models.note import SQL_INTEGER_MAX, Note

__all__ = ["NoteRepository"]

logger = logging.getLogger(__name__)


class NoteRepository:
    """Resource store backed by the ``notes`` table.

    Every lookup is scoped to an owner; there is no way to reach another
    user's note through this class.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_for_owner(self, note_id: int, username: str) -> Note | None:
        """Return the note with ``note_id`` if ``username`` owns it."""
        if not -SQL_INTEGER_MAX - 1 <= note_id <= SQL_INTEGER_MAX:
            return None
        return self.session.scalars(
            select(Note).where(Note.id == note_id, Note.username == username)
        ).first()

    def list_active(
        self,
        username: str,
        now: datetime,
        *,
        offset: int,
        limit: int,
    ) -> list[Note]:
        """Return active notes, oldest first."""
        stmt = (
            select(Note)
            .where(Note.username == username, _is_active(now))
            .order_by(Note.created_at.asc(), Note.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def list_latest(self, username: str, now: datetime, *, limit: int) -> list[Note]:
        """Return up to ``limit`` active notes, newest first."""
        stmt = (
            select(Note)
            .where(Note.username == username, _is_active(now))
            .order_by(Note.created_at.desc(), Note.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def save(self, note: Note) -> Note:
        """Insert or update ``note`` and return the refreshed instance."""
        self.session.add(note)
        self._commit("persist")
        self.session.refresh(note)
        return note

    def delete(self, note: Note) -> None:
        self.session.delete(note)
        self._commit("delete")

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.error("Could not %s note: %s", action, type(err).__name__)
            raise DependencyFailure() from err


def _is_active(now: datetime) -> ColumnElement[bool]:
    return or_(Note.expires_at.is_(None), Note.expires_at > now)
