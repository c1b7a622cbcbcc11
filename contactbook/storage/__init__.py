"""
Storage Module for Contactbook

Persistent storage for users and contacts:
- SQLAlchemy async engine (SQLite via aiosqlite by default)
- Typed repositories returning detached data classes
"""

from contactbook.storage.database import Database
from contactbook.storage.models import Base, User, Contact
from contactbook.storage.user_repository import (
    UserRepository,
    StoredUser,
)
from contactbook.storage.contact_repository import (
    ContactRepository,
    StoredContact,
    RecordNotFoundError,
)
from contactbook.storage.gateway import PersistenceGateway

__all__ = [
    # Database
    "Database",
    "Base",
    "User",
    "Contact",
    # Repositories
    "UserRepository",
    "StoredUser",
    "ContactRepository",
    "StoredContact",
    "RecordNotFoundError",
    "PersistenceGateway",
]
