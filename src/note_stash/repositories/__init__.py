"""Data access layer for users and notes."""

from .note_repo import NoteRepository
from .user_repo import UserRepository

__all__ = ["NoteRepository", "UserRepository"]
