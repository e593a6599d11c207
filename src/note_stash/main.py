"""Main entry point for the Note Stash application."""

from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from note_stash.api.v1 import auth_router, notes_router, users_router
from note_stash.core.errors import DependencyFailure, NoteStashError, ValidationFailed, error_body
from note_stash.core.logging import TRACE_ID_HEADER, reset_trace_id, set_trace_id, setup_logging
from note_stash.core.settings import settings
from note_stash.db.session import create_tables
from note_stash.services.tokens import get_token_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan events."""
    setup_logging(settings.log_level)
    # Load the signing key before the first request is served.
    get_token_service()
    if settings.auto_create_tables:
        create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    yield
    logger.info("%s shutting down", settings.app_name)


# Initialize FastAPI app
app = FastAPI(
    title="Note Stash API",
    description="Personal notes behind token-based authentication",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.middleware("http")
async def trace_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag the request and its log lines with a trace id and echo it back."""
    trace_id = request.headers.get(TRACE_ID_HEADER) or str(uuid.uuid4())
    token = set_trace_id(trace_id)
    try:
        response = await call_next(request)
    finally:
        reset_trace_id(token)
    response.headers[TRACE_ID_HEADER] = trace_id
    return response


def _error_response(status_code: int, body: dict[str, object]) -> JSONResponse:
    logger.error("Request failed: %s", body)
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(NoteStashError)
async def note_stash_error_handler(request: Request, exc: NoteStashError) -> JSONResponse:
    """Render domain errors with their own status and label."""
    return _error_response(exc.status_code, exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse request validation failures into a single 400 message."""
    error = ValidationFailed(format_validation_errors(exc.errors()))
    return _error_response(error.status_code, error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Give framework-raised HTTP errors the same body shape as domain errors."""
    phrase = HTTPStatus(exc.status_code).phrase
    body = error_body(exc.status_code, phrase, str(exc.detail))
    response = _error_response(exc.status_code, body)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Surface store failures as a generic server error without retrying."""
    logger.error("Store failure: %s", type(exc).__name__)
    error = DependencyFailure()
    return _error_response(error.status_code, error.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fall back to a 500 carrying the error message but never a traceback."""
    logger.exception("Unhandled error")
    body = error_body(
        500,
        "Internal Server Error",
        f"An unexpected error occurred. {exc}",
    )
    return _error_response(500, body)


def format_validation_errors(errors: Sequence[Any]) -> str:
    """Render pydantic errors as ``field: reason`` pairs joined by commas."""
    parts: list[str] = []
    for err in errors:
        loc = [str(item) for item in err.get("loc", ()) if item not in ("body", "query", "path")]
        field = loc[-1] if loc else "request"
        message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        parts.append(f"{field}: {message}")
    return ", ".join(parts)


# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(users_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Personal notes behind token-based authentication",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("note_stash.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
