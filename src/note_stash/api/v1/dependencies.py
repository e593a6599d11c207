"""Shared API dependencies for authentication, throttling and services."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from note_stash.core.errors import RateLimited
from note_stash.core.settings import settings
from note_stash.db.session import get_db
from note_stash.models import User
from note_stash.repositories import NoteRepository, UserRepository
from note_stash.services.auth import AuthService
from note_stash.services.notes import NoteService
from note_stash.services.rate_limit import RateLimiter, get_rate_limiter
from note_stash.services.tokens import TokenService, get_token_service

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for JWT authentication; missing headers are reported by
# the auth service so every failure shares the same error body.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_token_service_dep() -> TokenService:
    return get_token_service()


def get_rate_limiter_dep() -> RateLimiter:
    return get_rate_limiter()


TokenServiceDep = Annotated[TokenService, Depends(get_token_service_dep)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter_dep)]


def get_auth_service(db: SessionDep, tokens: TokenServiceDep) -> AuthService:
    return AuthService(UserRepository(db), tokens)


def get_note_service(db: SessionDep) -> NoteService:
    return NoteService(NoteRepository(db))


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    auth_service: AuthServiceDep,
) -> User:
    """Get the current authenticated user from the bearer access token.

    Raises:
        Unauthenticated: If the token is missing, invalid, expired or orphaned.
    """
    token = credentials.credentials if credentials is not None else None
    return auth_service.current_user(token)


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def client_ip(request: Request) -> str:
    """Return the network origin of ``request``.

    The first ``X-Forwarded-For`` hop wins when forwarded headers are trusted.
    """
    if settings.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.client.host if request.client else "unknown"


def origin_key(request: Request) -> str:
    return f"ip:{client_ip(request)}"


def user_key(username: str) -> str:
    return f"user:{username}"


def enforce_rate_limit(limiter: RateLimiter, *keys: str) -> None:
    """Admit the request under every key in order or raise.

    Raises:
        RateLimited: As soon as one key is over its limit.
    """
    if not limiter.admit_all(*keys):
        logger.warning("Too many requests for keys=%s", ",".join(keys))
        raise RateLimited()
