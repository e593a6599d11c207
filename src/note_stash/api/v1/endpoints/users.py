"""Endpoints describing the authenticated user."""

from __future__ import annotations

import logging

from fastapi import APIRouter

from note_stash.api.v1.dependencies import CurrentUserDep
from note_stash.schemas.common import ErrorResponse
from note_stash.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.get(
    "/user",
    summary="Current user",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}},
)
def get_user(current_user: CurrentUserDep) -> UserResponse:
    """Return handle and address of the caller."""
    logger.info("Fetching user details for user=%s", current_user.username)
    return UserResponse.model_validate(current_user)
