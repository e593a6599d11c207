"""Password hashing utilities built on passlib."""

from __future__ import annotations

from passlib.context import CryptContext
from passlib.exc import PasswordValueError

from note_stash.core.settings import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)

# Verified against when the handle is unknown so both login failures cost the same.
_DUMMY_HASH = pwd_context.hash("note-stash-dummy-secret")


def hash_password(password: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a plaintext password against a stored hash.

    A missing hash is checked against a dummy value and always fails, as does
    a password bcrypt refuses to process.
    """
    try:
        if hashed_password is None:
            pwd_context.verify(plain_password, _DUMMY_HASH)
            return False
        return pwd_context.verify(plain_password, hashed_password)
    except PasswordValueError:
        return False
