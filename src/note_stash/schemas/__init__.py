"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import AuthRequest, AuthResponse, RefreshRequest, RegisterRequest, RegisterResponse
from .common import ErrorResponse
from .note import NoteCreate, NoteResponse, NoteUpdate
from .user import UserResponse

__all__ = [
    "AuthRequest", "AuthResponse", "RefreshRequest", "RegisterRequest", "RegisterResponse",
    "ErrorResponse",
    "NoteCreate", "NoteResponse", "NoteUpdate",
    "UserResponse",
]
