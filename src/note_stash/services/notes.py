"""Owner-scoped note operations with expiry-gated visibility."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from note_stash.core.errors import Expired, NotFound, ValidationFailed
from note_stash.db.time import utcnow
from note_stash.models.note import SQL_INTEGER_MAX, Note
from note_stash.models.user import User
from note_stash.repositories.note_repo import NoteRepository
from note_stash.schemas.note import NoteCreate, NoteUpdate

__all__ = ["NoteService"]

logger = logging.getLogger(__name__)


class NoteService:
    """Authorize and perform note operations for an already-resolved owner.

    Visibility is decided per call against the service clock: a note whose
    expiry has passed can no longer be read, listed or updated, but its owner
    can still delete it.
    """

    def __init__(
        self,
        notes: NoteRepository,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.notes = notes
        self._clock = clock

    def create(self, owner: User, request: NoteCreate) -> Note:
        """Create a note owned by ``owner``."""
        logger.info("Creating note for user=%s", owner.username)
        note = Note(
            title=request.title,
            content=request.content,
            username=owner.username,
            expires_at=request.expires_at,
        )
        note = self.notes.save(note)
        logger.info("Created note id=%s", note.id)
        return note

    def get(self, owner: User, note_id: int) -> Note:
        """Return an active note owned by ``owner``.

        Raises:
            NotFound: If the note does not exist or belongs to someone else.
            Expired: If the note's expiry has passed.
        """
        logger.info("Fetching note id=%s for user=%s", note_id, owner.username)
        return self._get_active(owner, note_id)

    def list_active(self, owner: User, *, page: int = 0, size: int = 20) -> list[Note]:
        """Return one page of active notes, oldest first."""
        if page < 0:
            raise ValidationFailed("page: must be greater than or equal to 0")
        if size < 1:
            raise ValidationFailed("size: must be greater than or equal to 1")
        if size > SQL_INTEGER_MAX:
            raise ValidationFailed("size: is out of range")
        if page * size > SQL_INTEGER_MAX:
            raise ValidationFailed("page: is out of range")
        notes = self.notes.list_active(
            owner.username,
            self._clock(),
            offset=page * size,
            limit=size,
        )
        logger.info("Fetched %d active notes for user=%s", len(notes), owner.username)
        return notes

    def list_latest(self, owner: User, *, limit: int = 1000) -> list[Note]:
        """Return up to ``limit`` active notes, newest first."""
        if limit < 1:
            raise ValidationFailed("limit: must be greater than or equal to 1")
        if limit > SQL_INTEGER_MAX:
            raise ValidationFailed("limit: is out of range")
        notes = self.notes.list_latest(owner.username, self._clock(), limit=limit)
        logger.info("Fetched %d latest notes for user=%s", len(notes), owner.username)
        return notes

    def update(self, owner: User, note_id: int, request: NoteUpdate) -> Note:
        """Replace title, content and expiry of an active note."""
        logger.info("Updating note id=%s for user=%s", note_id, owner.username)
        note = self._get_active(owner, note_id)
        note.title = request.title
        note.content = request.content
        note.expires_at = request.expires_at
        note = self.notes.save(note)
        logger.info("Updated note id=%s", note.id)
        return note

    def delete(self, owner: User, note_id: int) -> None:
        """Delete a note owned by ``owner``, whether or not it has expired."""
        logger.info("Deleting note id=%s for user=%s", note_id, owner.username)
        note = self.notes.get_for_owner(note_id, owner.username)
        if note is None:
            raise NotFound(_not_found_message(note_id))
        self.notes.delete(note)
        logger.info("Deleted note id=%s", note_id)

    def _get_active(self, owner: User, note_id: int) -> Note:
        note = self.notes.get_for_owner(note_id, owner.username)
        if note is None:
            raise NotFound(_not_found_message(note_id))
        if not note.is_active(self._clock()):
            raise Expired(note_id)
        return note


def _not_found_message(note_id: int) -> str:
    return f"Note not found with ID={note_id}."
