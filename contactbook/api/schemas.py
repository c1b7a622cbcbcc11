"""
API Schemas for Contactbook

Pydantic models for request bodies and response serialization.

Request fields are optional at the schema level: the handlers check for
missing or empty values themselves so they can answer with a single
message naming every required field.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# User Schemas
# =============================================================================

class UserCreate(BaseModel):
    """Registration request."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "analytical-engine",
            }
        }
    )


class UserResponse(BaseModel):
    """Registered user. Never includes the password hash."""

    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class LoginRequest(BaseModel):
    """Login request."""

    email: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    """Issued bearer token."""

    access_token: str


# =============================================================================
# Contact Schemas
# =============================================================================

class ContactResponse(BaseModel):
    """Contact response model."""

    id: int
    name: str
    email: str
    telephone: str
    image: str

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """Plain success envelope."""

    message: str


# =============================================================================
# Error Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Contato não encontrado",
                "detail": None,
                "code": "BAD_REQUEST",
                "timestamp": "2025-01-20T12:00:00Z",
            }
        }
    )


# =============================================================================
# Health Check
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
