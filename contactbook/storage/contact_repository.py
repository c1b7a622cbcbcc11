"""
Contact Repository for Contactbook

CRUD storage for contacts using SQLAlchemy (async):
- SQLite (aiosqlite) for development/testing
- Any async SQLAlchemy driver in production

Each method opens its own session and issues a single statement; there are
no transactions spanning several calls. Concurrent updates to the same row
are last-write-wins.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy import select

from .database import Database
from .models import Contact


UPDATABLE_FIELDS = ("name", "email", "telephone", "image")


class RecordNotFoundError(Exception):
    """No row matched the given identifier."""

    def __init__(self, resource: str, identifier):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


@dataclass
class StoredContact:
    """Data class for contact data transfer."""

    id: int
    name: str
    email: str
    telephone: str
    image: str

    @classmethod
    def from_model(cls, model: Contact) -> "StoredContact":
        """Create from SQLAlchemy model."""
        return cls(
            id=model.id,
            name=model.name,
            email=model.email,
            telephone=model.telephone,
            image=model.image,
        )


class ContactRepository:
    """
    Repository for contact CRUD operations.

    Usage:
        repo = ContactRepository(database)

        contact = await repo.create(
            name="Ada",
            email="ada@example.com",
            telephone="555-0100",
            image="uploads/1700000000000-k3j4h5g6f7d8s.png",
        )
        await repo.update(contact.id, telephone="555-0199")
    """

    def __init__(self, database: Database):
        self.database = database

    async def create(
        self,
        name: str,
        email: str,
        telephone: str,
        image: str,
    ) -> StoredContact:
        """Insert a new contact and return it with its generated id."""
        async with self.database.session() as session:
            contact = Contact(
                name=name,
                email=email,
                telephone=telephone,
                image=image,
            )
            session.add(contact)
            await session.commit()
            await session.refresh(contact)

            logger.debug(f"Created contact {contact.id}")
            return StoredContact.from_model(contact)

    async def find_by_id(self, contact_id: int) -> Optional[StoredContact]:
        async with self.database.session() as session:
            contact = await session.get(Contact, contact_id)
            return StoredContact.from_model(contact) if contact else None

    async def find_all(self) -> list[StoredContact]:
        """All contacts in insertion order. Unbounded."""
        async with self.database.session() as session:
            result = await session.execute(select(Contact).order_by(Contact.id))
            return [StoredContact.from_model(c) for c in result.scalars().all()]

    async def update(self, contact_id: int, **fields) -> StoredContact:
        """
        Update the given fields of a contact.

        Args:
            contact_id: Contact ID
            **fields: Any of name, email, telephone, image

        Returns:
            Updated StoredContact

        Raises:
            RecordNotFoundError: If no contact has this id.
            ValueError: If an unknown field is given.
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown contact fields: {', '.join(sorted(unknown))}")

        async with self.database.session() as session:
            contact = await session.get(Contact, contact_id)
            if contact is None:
                raise RecordNotFoundError("Contact", contact_id)

            for key, value in fields.items():
                setattr(contact, key, value)

            await session.commit()
            await session.refresh(contact)

            logger.debug(f"Updated contact {contact_id}: {sorted(fields)}")
            return StoredContact.from_model(contact)

    async def delete(self, contact_id: int) -> Optional[StoredContact]:
        """
        Delete a contact.

        Returns:
            The deleted contact, or None if no row matched.
        """
        async with self.database.session() as session:
            contact = await session.get(Contact, contact_id)
            if contact is None:
                return None

            deleted = StoredContact.from_model(contact)
            await session.delete(contact)
            await session.commit()
            return deleted
