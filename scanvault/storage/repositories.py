"""Repositories for user and document records.

Each operation runs in its own session and transaction, so a single call is
atomic at the storage layer. Results are returned as plain dataclasses that
stay valid after the session closes.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from scanvault.errors import DuplicateUser, StorageError
from scanvault.utils.logger import get_logger

from .database import Database, DocumentRecord, UserRecord

logger = get_logger(__name__)

# Ids are stored as signed 64-bit integers.
_MAX_ID = 2**63 - 1


def _storable_id(doc_id: int) -> bool:
    return -_MAX_ID - 1 <= doc_id <= _MAX_ID


@dataclass
class User:
    """A registered account."""

    id: int
    username: str
    password_hash: str
    created_at: datetime


@dataclass
class Document:
    """A scanned document owned by a single user."""

    id: int
    owner: str
    title: str
    content: str
    file_ref: str
    created_at: datetime
    updated_at: datetime


def _to_user(record: UserRecord) -> User:
    return User(
        id=record.id,
        username=record.username,
        password_hash=record.password_hash,
        created_at=record.created_at,
    )


def _to_document(record: DocumentRecord) -> Document:
    return Document(
        id=record.id,
        owner=record.owner,
        title=record.title,
        content=record.content or "",
        file_ref=record.file_ref,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class UserRepository:
    """Persistence for user accounts."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def add(self, username: str, password_hash: str) -> User:
        """Insert a new user.

        Raises:
            DuplicateUser: If the username is already taken.
            StorageError: On any other database failure.
        """
        try:
            with self.database.sessions.begin() as session:
                record = UserRecord(username=username, password_hash=password_hash)
                session.add(record)
                session.flush()
                return _to_user(record)
        except IntegrityError as exc:
            raise DuplicateUser() from exc
        except SQLAlchemyError as exc:
            logger.error("Failed to insert user: %s", exc)
            raise StorageError() from exc

    def get(self, username: str) -> User | None:
        try:
            with self.database.sessions() as session:
                record = session.scalar(
                    select(UserRecord).where(UserRecord.username == username)
                )
                return _to_user(record) if record else None
        except SQLAlchemyError as exc:
            logger.error("Failed to read user: %s", exc)
            raise StorageError() from exc


class DocumentRepository:
    """Persistence for document metadata.

    Mutating calls take the expected owner and match on ``(id, owner)`` in a
    single statement, so ownership is checked in the same unit as the write.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def add(self, owner: str, title: str, content: str, file_ref: str) -> Document:
        try:
            with self.database.sessions.begin() as session:
                record = DocumentRecord(
                    owner=owner, title=title, content=content, file_ref=file_ref
                )
                session.add(record)
                session.flush()
                session.refresh(record)
                return _to_document(record)
        except SQLAlchemyError as exc:
            logger.error("Failed to insert document for %s: %s", owner, exc)
            raise StorageError() from exc

    def get(self, doc_id: int) -> Document | None:
        if not _storable_id(doc_id):
            return None
        try:
            with self.database.sessions() as session:
                record = session.get(DocumentRecord, doc_id)
                return _to_document(record) if record else None
        except SQLAlchemyError as exc:
            logger.error("Failed to read document %s: %s", doc_id, exc)
            raise StorageError() from exc

    def list_for_owner(self, owner: str) -> list[Document]:
        try:
            with self.database.sessions() as session:
                records = session.scalars(
                    select(DocumentRecord)
                    .where(DocumentRecord.owner == owner)
                    .order_by(DocumentRecord.id)
                )
                return [_to_document(r) for r in records]
        except SQLAlchemyError as exc:
            logger.error("Failed to list documents for %s: %s", owner, exc)
            raise StorageError() from exc

    def update(
        self,
        doc_id: int,
        owner: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Document | None:
        """Apply the supplied fields; ``None`` leaves a field unchanged.

        Returns:
            The updated document, or ``None`` if no document with this id
            belongs to ``owner``.
        """
        if not _storable_id(doc_id):
            return None
        try:
            with self.database.sessions.begin() as session:
                record = session.scalar(
                    select(DocumentRecord)
                    .where(DocumentRecord.id == doc_id, DocumentRecord.owner == owner)
                    .with_for_update()
                )
                if record is None:
                    return None
                if title is not None:
                    record.title = title
                if content is not None:
                    record.content = content
                session.flush()
                session.refresh(record)
                return _to_document(record)
        except SQLAlchemyError as exc:
            logger.error("Failed to update document %s: %s", doc_id, exc)
            raise StorageError() from exc

    def delete(self, doc_id: int, owner: str) -> bool:
        """Delete a document owned by ``owner``; ``False`` if none matched."""
        if not _storable_id(doc_id):
            return False
        try:
            with self.database.sessions.begin() as session:
                result = session.execute(
                    delete(DocumentRecord).where(
                        DocumentRecord.id == doc_id, DocumentRecord.owner == owner
                    )
                )
                return result.rowcount > 0
        except SQLAlchemyError as exc:
            logger.error("Failed to delete document %s: %s", doc_id, exc)
            raise StorageError() from exc
