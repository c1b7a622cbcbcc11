"""
Unit tests for the persistence gateway.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from contactbook.storage import RecordNotFoundError, StoredContact, StoredUser

pytestmark = pytest.mark.asyncio


async def _create_contact(gateway, **overrides) -> StoredContact:
    data = {
        "name": "Grace Hopper",
        "email": "grace@example.com",
        "telephone": "555-0100",
        "image": "uploads/1-abc.png",
    }
    data.update(overrides)
    return await gateway.contact.create(**data)


class TestUserRepository:
    """Tests for UserRepository."""

    async def test_create_and_find(self, gateway):
        user = await gateway.user.create("Ada", "ada@example.com", "$2b$hash")

        assert isinstance(user, StoredUser)
        assert user.id is not None
        assert await gateway.user.find_by_email("ada@example.com") == user
        assert await gateway.user.find_by_id(user.id) == user

    async def test_public_view_omits_password(self, gateway):
        user = await gateway.user.create("Ada", "ada@example.com", "$2b$hash")

        assert user.to_public_dict() == {"id": user.id, "name": "Ada", "email": "ada@example.com"}

    async def test_duplicate_email_violates_constraint(self, gateway):
        await gateway.user.create("Ada", "ada@example.com", "h1")

        with pytest.raises(IntegrityError):
            await gateway.user.create("Other", "ada@example.com", "h2")

    async def test_missing_user(self, gateway):
        assert await gateway.user.find_by_email("nobody@example.com") is None
        assert await gateway.user.find_by_id(999) is None


class TestContactRepository:
    """Tests for ContactRepository."""

    async def test_create_and_find(self, gateway):
        contact = await _create_contact(gateway)

        assert contact.id is not None
        assert await gateway.contact.find_by_id(contact.id) == contact

    async def test_find_all_in_insertion_order(self, gateway):
        first = await _create_contact(gateway, name="First")
        second = await _create_contact(gateway, name="Second")

        contacts = await gateway.contact.find_all()

        assert [c.id for c in contacts] == [first.id, second.id]

    async def test_find_all_empty(self, gateway):
        assert await gateway.contact.find_all() == []

    async def test_update_single_field(self, gateway):
        contact = await _create_contact(gateway)

        updated = await gateway.contact.update(contact.id, telephone="555-0199")

        assert updated.telephone == "555-0199"
        assert updated.name == contact.name
        assert updated.email == contact.email
        assert updated.image == contact.image

    async def test_update_missing_contact(self, gateway):
        with pytest.raises(RecordNotFoundError):
            await gateway.contact.update(404, name="Nobody")

    async def test_update_rejects_unknown_fields(self, gateway):
        contact = await _create_contact(gateway)

        with pytest.raises(ValueError):
            await gateway.contact.update(contact.id, id=99)

    async def test_delete(self, gateway):
        contact = await _create_contact(gateway)

        deleted = await gateway.contact.delete(contact.id)

        assert deleted == contact
        assert await gateway.contact.find_by_id(contact.id) is None

    async def test_delete_missing_contact_returns_none(self, gateway):
        assert await gateway.contact.delete(404) is None
