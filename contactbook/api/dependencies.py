"""
Dependency injection for FastAPI routes.

Provides:
- Configuration
- An explicitly constructed service container (database, repositories,
  password hasher, token service, upload storage)
- The bearer-token authentication guard
"""

import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from ..security import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    DEFAULT_BCRYPT_ROUNDS,
    InvalidTokenError,
    PasswordHasher,
    TokenClaims,
    TokenService,
)
from ..storage import Database, PersistenceGateway
from .middleware.error_handler import UnauthenticatedError
from .uploads import UploadStorage


# Used when JWT_SECRET is unset outside production. Anyone who knows it can
# mint valid tokens.
FALLBACK_JWT_SECRET = "KEYFORGUARDAPP"


class ConfigurationError(Exception):
    """Settings cannot be used to start the application."""


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./contactbook.db"
    database_echo: bool = False

    # Tokens
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = ALGORITHM
    access_token_expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES

    # Password hashing work factor
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS

    # File uploads
    upload_dir: str = "uploads"

    # HTTP
    cors_origin: str = "http://localhost:3000"
    host: str = "0.0.0.0"
    port: int = 3001

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            jwt_secret=os.getenv("JWT_SECRET") or None,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", cls.access_token_expire_minutes)),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", cls.bcrypt_rounds)),
            upload_dir=os.getenv("UPLOAD_DIR", cls.upload_dir),
            cors_origin=os.getenv("CORS_ORIGIN", cls.cors_origin),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", cls.port)),
            environment=os.getenv("CONTACTBOOK_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )

    @property
    def token_secret(self) -> str:
        """Signing secret, falling back to the built-in development key."""
        return self.jwt_secret or FALLBACK_JWT_SECRET

    def validate(self) -> None:
        """
        Check settings before startup.

        Raises:
            ConfigurationError: If running in production without JWT_SECRET.
        """
        if not self.jwt_secret:
            if self.environment == "production":
                raise ConfigurationError("JWT_SECRET must be set in production")
            logger.warning("JWT_SECRET is not set; using the built-in development secret")


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Services
# =============================================================================

class ServiceContainer:
    """
    Every service the routes need, built once at startup.

    Routes reach it through ``request.app.state.services``; nothing is
    registered globally.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.database = Database(settings.database_url, echo=settings.database_echo)
        self.gateway = PersistenceGateway(self.database)
        self.hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        self.tokens = TokenService(
            secret=settings.token_secret,
            algorithm=settings.jwt_algorithm,
            expires_in=timedelta(minutes=settings.access_token_expire_minutes),
        )
        self.uploads = UploadStorage(settings.upload_dir)


def get_services(request: Request) -> ServiceContainer:
    """Service container of the running application."""
    return request.app.state.services


def get_gateway(services: ServiceContainer = Depends(get_services)) -> PersistenceGateway:
    return services.gateway


def get_hasher(services: ServiceContainer = Depends(get_services)) -> PasswordHasher:
    return services.hasher


def get_token_service(services: ServiceContainer = Depends(get_services)) -> TokenService:
    return services.tokens


# =============================================================================
# Authentication Dependencies
# =============================================================================

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    services: ServiceContainer = Depends(get_services),
) -> TokenClaims:
    """
    Guard for protected routes.

    Verifies the bearer token, checks the subject still exists and stores
    the claims on ``request.state.user``.

    Raises:
        UnauthenticatedError: On a missing, invalid or expired token, or an
            unknown subject.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError(detail="Missing bearer token")

    try:
        claims = services.tokens.verify(credentials.credentials)
    except InvalidTokenError as e:
        raise UnauthenticatedError(detail=str(e)) from e

    user = await services.gateway.user.find_by_id(claims.sub)
    if user is None:
        logger.warning(f"Token subject {claims.sub} no longer exists")
        raise UnauthenticatedError(detail="Unknown user")

    request.state.user = claims
    return claims
