"""
Persistence gateway: the only entry point to the store.
"""

from .contact_repository import ContactRepository
from .database import Database
from .user_repository import UserRepository


class PersistenceGateway:
    """Groups the typed repositories over one database."""

    def __init__(self, database: Database):
        self.database = database
        self.user = UserRepository(database)
        self.contact = ContactRepository(database)
