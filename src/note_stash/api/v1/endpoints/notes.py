"""Note endpoints for the Note Stash API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query, Response, status

from note_stash.api.v1.dependencies import CurrentUserDep, NoteServiceDep
from note_stash.core.settings import settings
from note_stash.schemas.common import ErrorResponse
from note_stash.schemas.note import NoteCreate, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/notes",
    tags=["notes"],
    responses={401: {"model": ErrorResponse}},
)


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_note(
    payload: NoteCreate,
    current_user: CurrentUserDep,
    note_service: NoteServiceDep,
) -> NoteResponse:
    """Create a note owned by the caller."""
    logger.info("Received note creation request")
    note = note_service.create(current_user, payload)
    return NoteResponse.model_validate(note)


@router.get("", response_model=list[NoteResponse])
def list_notes(
    current_user: CurrentUserDep,
    note_service: NoteServiceDep,
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int = Query(
        settings.notes_default_page_size,
        ge=1,
        le=settings.notes_max_page_size,
        description="Number of notes per page",
    ),
) -> list[NoteResponse]:
    """List the caller's active notes, oldest first."""
    notes = note_service.list_active(current_user, page=page, size=size)
    return [NoteResponse.model_validate(note) for note in notes]


@router.get("/latest", response_model=list[NoteResponse])
def list_latest_notes(
    current_user: CurrentUserDep,
    note_service: NoteServiceDep,
    limit: int = Query(
        settings.notes_latest_default_limit,
        ge=1,
        description="Maximum number of notes to return",
    ),
) -> list[NoteResponse]:
    """List the caller's most recent active notes, newest first."""
    notes = note_service.list_latest(current_user, limit=limit)
    return [NoteResponse.model_validate(note) for note in notes]


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def get_note(
    note_id: int,
    current_user: CurrentUserDep,
    note_service: NoteServiceDep,
) -> NoteResponse:
    """Get one of the caller's active notes by ID."""
    note = note_service.get(current_user, note_id)
    return NoteResponse.model_validate(note)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_note(
    note_id: int,
    payload: NoteUpdate,
    current_user: CurrentUserDep,
    note_service: NoteServiceDep,
) -> NoteResponse:
    """Replace title, content and expiry of one of the caller's active notes."""
    logger.info("Received note update request")
    note = note_service.update(current_user, note_id, payload)
    return NoteResponse.model_validate(note)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
def delete_note(
    note_id: int,
    current_user: CurrentUserDep,
    note_service: NoteServiceDep,
) -> Response:
    """Delete one of the caller's notes, even after it has expired."""
    logger.info("Received note deletion request")
    note_service.delete(current_user, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
