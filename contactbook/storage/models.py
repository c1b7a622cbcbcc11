"""
Database models for Contactbook.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class User(Base):
    """User model for authentication."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # bcrypt hash, never the plaintext
    password = Column(String(255), nullable=False)


class Contact(Base):
    """Contact model. ``image`` is the path of the uploaded picture."""
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    telephone = Column(String(50), nullable=False)
    image = Column(String(500), nullable=False)
