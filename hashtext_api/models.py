"""
Pydantic models for API requests and responses.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity established by the authorization gate for one request."""

    user_id: str


# ============================================================================
# User
# ============================================================================


class UserResponse(BaseModel):
    """The calling user's account."""

    user_id: str = Field(..., description="User token (SHA-256 of the user's name)")
    name: str = Field(..., description="Display name")
    credit: int = Field(..., ge=0, description="Remaining credit")


# ============================================================================
# Text
# ============================================================================


class TextDocument(BaseModel):
    """Text to hash, or text found for a hash."""

    model_config = ConfigDict(
        strict=True,
        json_schema_extra={"examples": [{"text": "test text handler"}]},
    )

    text: str = Field(..., description="Arbitrary text, may be empty")


class HashResponse(BaseModel):
    """Hash under which submitted text is stored."""

    hash: str = Field(..., description="Lowercase hex SHA-256 of the text")


# ============================================================================
# Health
# ============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="ok or degraded")
    version: str = Field(..., description="API version")
    database: bool = Field(..., description="Database reachable")
