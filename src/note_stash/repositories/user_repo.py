"""Data access helpers for working with users."""
from __future__ import annotations

import logging

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from note_stash.core.errors import DependencyFailure
from note_stash.models.user import User

__all__ = ["UserRepository"]

logger = logging.getLogger(__name__)


class UserRepository:
    """Credential store backed by the ``users`` table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_username(self, username: str) -> User | None:
        """Return a user by handle."""
        return self.session.get(User, username)

    def exists_by_username(self, username: str) -> bool:
        return bool(self.session.scalar(select(exists().where(User.username == username))))

    def exists_by_email(self, email: str) -> bool:
        return bool(self.session.scalar(select(exists().where(User.email == email))))

    def save(self, user: User) -> User:
        """Insert or update ``user`` and return the refreshed instance.

        Raises:
            IntegrityError: If a uniqueness constraint is violated.
            DependencyFailure: If the database rejects the write for any other reason.
        """
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.error("Could not persist user: %s", type(err).__name__)
            raise DependencyFailure() from err
        self.session.refresh(user)
        return user
