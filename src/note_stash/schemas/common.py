"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Structured body returned for every error response."""

    timestamp: datetime = Field(..., description="When the error was produced (UTC)")
    status: int = Field(..., description="HTTP status code")
    error: str = Field(..., description="Short error label")
    message: str = Field(..., description="Human readable explanation")
