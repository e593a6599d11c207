"""Business logic services for the Note Stash application."""

from .auth import AuthService
from .notes import NoteService
from .rate_limit import RateLimiter
from .tokens import TokenService

__all__ = [
    "AuthService",
    "NoteService",
    "RateLimiter",
    "TokenService",
]
