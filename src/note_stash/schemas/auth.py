"""Authentication Pydantic schemas."""

import re

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel
from .user import UserResponse

USERNAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6


def _require_text(value: str, message: str) -> str:
    if not value or not value.strip():
        raise ValueError(message)
    return value


class RegisterRequest(CamelModel):
    """Schema for registering a new user."""

    username: str = Field(..., description="3-50 characters, letters, digits and underscores")
    email: EmailStr = Field(..., description="Contact address")
    password: str = Field(..., description="At least 6 characters")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate the handle's length and alphabet."""
        _require_text(v, "Username is required")
        if not USERNAME_MIN_LENGTH <= len(v) <= USERNAME_MAX_LENGTH:
            raise ValueError("Username must be between 3 and 50 characters")
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username can only contain alphanumeric characters and underscores, "
                "and cannot start with an underscore or number."
            )
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        _require_text(v, "Password is required")
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError("Password must be at least 6 characters")
        if "\x00" in v:
            raise ValueError("Password must not contain NUL characters")
        return v


class RegisterResponse(UserResponse):
    """Registration response echoing the stored handle and address."""


class AuthRequest(CamelModel):
    """Schema for login submissions."""

    username: str = Field(..., description="Registered handle")
    password: str = Field(..., description="Plaintext password")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _require_text(v, "Username is required")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _require_text(v, "Password is required")


class RefreshRequest(CamelModel):
    """Schema for exchanging a refresh token for a new access token."""

    refresh_token: str = Field(..., description="Refresh token issued at login")


class AuthResponse(CamelModel):
    """Token pair returned after login or refresh."""

    token: str = Field(..., description="JWT access token")
    type: str = Field("Bearer", description="Token type")
    username: str = Field(..., description="Authenticated handle")
    email: str = Field(..., description="Contact address")
    refresh_token: str = Field(..., description="JWT refresh token")
