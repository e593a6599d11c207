"""Version 1 API endpoints."""

from .endpoints import auth_router, notes_router, users_router

__all__ = [
    "auth_router",
    "notes_router",
    "users_router",
]
