"""User-related Pydantic schemas."""

from pydantic import ConfigDict, Field

from .common import CamelModel


class UserResponse(CamelModel):
    """Public view of an identity. The password hash is never included."""

    username: str = Field(..., description="Unique handle")
    email: str = Field(..., description="Contact address")

    model_config = ConfigDict(from_attributes=True)
