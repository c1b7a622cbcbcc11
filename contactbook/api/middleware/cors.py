"""
CORS Configuration

Restricts cross-origin access to the configured front-end origin.
"""

from dataclasses import dataclass, field
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


DEFAULT_ORIGIN = "http://localhost:3000"


@dataclass
class CORSConfig:
    """CORS configuration settings."""

    # Allowed origins
    allowed_origins: List[str] = field(default_factory=lambda: [DEFAULT_ORIGIN])

    # Allow credentials (cookies, authorization headers)
    allow_credentials: bool = True

    # Allowed HTTP methods
    allowed_methods: List[str] = field(default_factory=lambda: [
        "GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"
    ])

    # Allowed headers
    allowed_headers: List[str] = field(default_factory=lambda: [
        "Accept",
        "Accept-Language",
        "Content-Type",
        "Content-Language",
        "Authorization",
        "X-Request-ID",
    ])

    # Headers to expose to the browser
    expose_headers: List[str] = field(default_factory=lambda: [
        "X-Request-ID",
    ])

    # Max age for preflight cache (in seconds)
    max_age: int = 600


def get_cors_config(origin: str = DEFAULT_ORIGIN) -> CORSConfig:
    """Build the CORS configuration for a single allowed origin."""
    return CORSConfig(allowed_origins=[origin.strip()])


def setup_cors(app: FastAPI, config: CORSConfig = None) -> None:
    """
    Configure CORS middleware for the FastAPI application.

    Args:
        app: FastAPI application instance.
        config: CORS configuration. Defaults to the local front-end origin.
    """
    if config is None:
        config = get_cors_config()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=config.allow_credentials,
        allow_methods=config.allowed_methods,
        allow_headers=config.allowed_headers,
        expose_headers=config.expose_headers,
        max_age=config.max_age,
    )
