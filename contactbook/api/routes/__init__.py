"""
API Routes for Contactbook

Route modules:
- users: Registration and login
- contacts: Contact CRUD with image upload
"""

from contactbook.api.routes.users import router as users_router
from contactbook.api.routes.contacts import router as contacts_router

__all__ = [
    "users_router",
    "contacts_router",
]
