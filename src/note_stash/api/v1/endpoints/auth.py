"""Authentication endpoints for the Note Stash API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, status

from note_stash.api.v1.dependencies import (
    AuthServiceDep,
    RateLimiterDep,
    enforce_rate_limit,
    origin_key,
    user_key,
)
from note_stash.schemas.auth import (
    AuthRequest,
    AuthResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
)
from note_stash.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    summary="Register user",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
def register_user(
    payload: RegisterRequest,
    request: Request,
    auth_service: AuthServiceDep,
    limiter: RateLimiterDep,
) -> RegisterResponse:
    """Register a new user with a unique handle and address."""
    logger.info("Received register request for user=%s", payload.username)
    enforce_rate_limit(limiter, origin_key(request))
    return auth_service.register(payload)


@router.post(
    "/login",
    summary="Log in",
    status_code=status.HTTP_200_OK,
    response_model=AuthResponse,
    responses={401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
def login_user(
    payload: AuthRequest,
    request: Request,
    auth_service: AuthServiceDep,
    limiter: RateLimiterDep,
) -> AuthResponse:
    """Authenticate with handle and password and receive a token pair.

    Throttled first by network origin, then by the targeted handle.
    """
    logger.info("Received login request for user=%s", payload.username)
    enforce_rate_limit(limiter, origin_key(request), user_key(payload.username))
    return auth_service.login(payload)


@router.post(
    "/refresh",
    summary="Refresh access token",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}},
)
def refresh_token(
    payload: RefreshRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """Exchange a refresh token for a new access token.

    The same refresh token is returned and stays usable until it expires.
    """
    return auth_service.refresh(payload.refresh_token)
