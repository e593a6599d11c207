"""Registration, login and token refresh."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from note_stash.core.errors import (
    AlreadyExists,
    InvalidCredentials,
    TokenError,
    TokenExpired,
    Unauthenticated,
)
from note_stash.core.security import hash_password, verify_password
from note_stash.models.user import User
from note_stash.repositories.user_repo import UserRepository
from note_stash.schemas.auth import AuthRequest, AuthResponse, RegisterRequest, RegisterResponse
from note_stash.services.tokens import TokenService

__all__ = ["AuthService"]

logger = logging.getLogger(__name__)


class AuthService:
    """Compose the credential store and the token service into a session lifecycle.

    Nothing is kept server-side between requests: every authenticated call is
    resolved again from the token it carries.
    """

    def __init__(self, users: UserRepository, tokens: TokenService) -> None:
        self.users = users
        self.tokens = tokens

    def register(self, request: RegisterRequest) -> RegisterResponse:
        """Create a new identity.

        Raises:
            AlreadyExists: If the handle or the address is already taken. The
                message names whichever value collided.
        """
        if self.users.exists_by_username(request.username):
            raise AlreadyExists(request.username)
        if self.users.exists_by_email(request.email):
            raise AlreadyExists(request.email)

        user = User(
            username=request.username,
            email=request.email,
            password=hash_password(request.password),
        )
        try:
            user = self.users.save(user)
        except IntegrityError as err:
            # Lost a race with a concurrent registration for the same handle or address.
            if self.users.exists_by_username(request.username):
                raise AlreadyExists(request.username) from err
            if self.users.exists_by_email(request.email):
                raise AlreadyExists(request.email) from err
            raise AlreadyExists(request.username) from err

        logger.info("Registered user=%s", user.username)
        return RegisterResponse(username=user.username, email=user.email)

    def login(self, request: AuthRequest) -> AuthResponse:
        """Verify credentials and issue a fresh access/refresh token pair.

        Raises:
            InvalidCredentials: For an unknown handle and for a wrong password alike.
        """
        user = self.users.get_by_username(request.username)
        stored_hash = user.password if user is not None else None
        if not verify_password(request.password, stored_hash) or user is None:
            logger.info("Rejected login for user=%s", request.username)
            raise InvalidCredentials()

        logger.info("Logged in user=%s", user.username)
        return AuthResponse(
            token=self.tokens.issue_access(user.username),
            username=user.username,
            email=user.email,
            refresh_token=self.tokens.issue_refresh(user.username),
        )

    def refresh(self, refresh_token: str) -> AuthResponse:
        """Mint a new access token; the refresh token itself is handed back unchanged.

        Raises:
            TokenExpired: If the refresh token is expired or cannot be verified.
            Unauthenticated: If the token's subject no longer exists.
        """
        if self.tokens.is_expired(refresh_token):
            raise TokenExpired()

        subject = self.tokens.decode(refresh_token).subject
        user = self.users.get_by_username(subject)
        if user is None:
            raise Unauthenticated("User not found")

        logger.info("Refreshed access token for user=%s", user.username)
        return AuthResponse(
            token=self.tokens.issue_access(user.username),
            username=user.username,
            email=user.email,
            refresh_token=refresh_token,
        )

    def current_user(self, access_token: str | None) -> User:
        """Resolve the identity behind a bearer access token.

        Raises:
            Unauthenticated: If the token is absent, unverifiable, expired, or
                names a user that no longer exists.
        """
        if not access_token:
            raise Unauthenticated("Not authenticated")
        try:
            claims = self.tokens.decode(access_token)
        except TokenError as err:
            raise Unauthenticated() from err
        if claims.is_expired(self.tokens.now()):
            raise Unauthenticated("Token has expired")

        user = self.users.get_by_username(claims.subject)
        if user is None:
            raise Unauthenticated("User not found")
        return user
