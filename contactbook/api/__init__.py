"""
Contactbook - FastAPI Backend.
"""

from .main import create_app, main
from .dependencies import (
    Settings,
    ConfigurationError,
    get_settings,
    ServiceContainer,
    get_current_user,
)
from .schemas import (
    UserCreate,
    UserResponse,
    LoginRequest,
    TokenResponse,
    ContactResponse,
    MessageResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Application
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "ConfigurationError",
    "get_settings",
    "ServiceContainer",
    "get_current_user",
    # Schemas
    "UserCreate",
    "UserResponse",
    "LoginRequest",
    "TokenResponse",
    "ContactResponse",
    "MessageResponse",
    "HealthResponse",
    "ErrorResponse",
]
