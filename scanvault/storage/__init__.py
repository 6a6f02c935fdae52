"""Persistence capabilities: SQL metadata and local file bytes."""

from .database import Database
from .files import LocalFileStore
from .repositories import Document, DocumentRepository, User, UserRepository

__all__ = [
    "Database",
    "Document",
    "DocumentRepository",
    "LocalFileStore",
    "User",
    "UserRepository",
]
