"""
User Repository for Contactbook

Registration and lookup of users. Users are never updated or deleted here.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy import select

from .database import Database
from .models import User


@dataclass
class StoredUser:
    """Data class for user data transfer."""

    id: int
    name: str
    email: str
    password: str

    @classmethod
    def from_model(cls, model: User) -> "StoredUser":
        """Create from SQLAlchemy model."""
        return cls(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
        )

    def to_public_dict(self) -> dict:
        """Safe view of the user, without the password hash."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
        }


class UserRepository:
    """Single-statement accessors for the ``users`` table."""

    def __init__(self, database: Database):
        self.database = database

    async def create(self, name: str, email: str, password_hash: str) -> StoredUser:
        """
        Insert a new user.

        Raises:
            sqlalchemy.exc.IntegrityError: If the email is already registered.
        """
        async with self.database.session() as session:
            user = User(name=name, email=email, password=password_hash)
            session.add(user)
            await session.commit()
            await session.refresh(user)

            logger.debug(f"Created user {user.id}")
            return StoredUser.from_model(user)

    async def find_by_email(self, email: str) -> Optional[StoredUser]:
        async with self.database.session() as session:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
            return StoredUser.from_model(user) if user else None

    async def find_by_id(self, user_id: int) -> Optional[StoredUser]:
        async with self.database.session() as session:
            user = await session.get(User, user_id)
            return StoredUser.from_model(user) if user else None
