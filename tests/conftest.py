"""
Pytest configuration and fixtures for Contactbook tests.
"""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from contactbook.api.main import create_app
from contactbook.api.dependencies import Settings
from contactbook.storage import Database, PersistenceGateway


# =============================================================================
# Test Settings
# =============================================================================

@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings configured for testing: throwaway database and upload dir."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        database_echo=False,
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
        environment="test",
        debug=False,
    )


@pytest.fixture
def upload_dir(test_settings) -> Path:
    return Path(test_settings.upload_dir)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """Standalone database with tables created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'repo.db'}")
    await db.create_tables()

    yield db

    await db.dispose()


@pytest.fixture
def gateway(database) -> PersistenceGateway:
    return PersistenceGateway(database)


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app(test_settings):
    """Create FastAPI application for testing."""
    application = create_app(test_settings)

    # ASGITransport does not run the lifespan
    await application.state.services.database.create_tables()

    yield application

    await application.state.services.database.dispose()


@pytest.fixture
def services(app):
    return app.state.services


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def sample_user_data() -> dict:
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "password": "analytical-engine",
    }


@pytest.fixture
def sample_contact_data() -> dict:
    return {
        "name": "Charles Babbage",
        "email": "charles@example.com",
        "telephone": "+44 20 7946 0000",
    }


@pytest.fixture
def image_file() -> tuple:
    """Multipart tuple for a small PNG upload."""
    return ("avatar.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 32, "image/png")


@pytest_asyncio.fixture
async def registered_user(client, sample_user_data) -> dict:
    response = await client.post("/app/user", json=sample_user_data)
    assert response.status_code == 200
    return response.json()


@pytest_asyncio.fixture
async def auth_headers(client, registered_user, sample_user_data) -> dict:
    response = await client.post(
        "/app/login",
        json={
            "email": sample_user_data["email"],
            "password": sample_user_data["password"],
        },
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture
async def created_contact(client, auth_headers, sample_contact_data, image_file) -> dict:
    response = await client.post(
        "/app/contacts",
        data=sample_contact_data,
        files={"image": image_file},
        headers=auth_headers,
    )
    assert response.status_code == 200
    return response.json()
