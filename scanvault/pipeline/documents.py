"""Ownership-scoped access to stored documents.

Every operation is filtered by the caller's verified identity. A document
that exists but belongs to someone else raises :class:`Forbidden`, which the
API renders exactly like :class:`NotFound`; the real cause is only logged.
"""

from scanvault.errors import Forbidden, NotFound, StorageError
from scanvault.storage.files import LocalFileStore
from scanvault.storage.repositories import Document, DocumentRepository
from scanvault.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentGateway:
    """CRUD over documents, restricted to their owner.

    Args:
        documents: Repository for document metadata.
        files: Store holding the referenced scan files.
    """

    def __init__(self, documents: DocumentRepository, files: LocalFileStore) -> None:
        self.documents = documents
        self.files = files

    def list(self, identity: str) -> list[Document]:
        return self.documents.list_for_owner(identity)

    def get(self, identity: str, doc_id: int) -> Document:
        return self._owned(identity, doc_id)

    def update(
        self,
        identity: str,
        doc_id: int,
        title: str | None = None,
        content: str | None = None,
    ) -> Document:
        """Change the title and/or content of one of the caller's documents.

        Owner and file reference are never modified.

        Raises:
            NotFound: No such document, or it belongs to another user.
        """
        self._owned(identity, doc_id)
        updated = self.documents.update(doc_id, identity, title=title, content=content)
        if updated is None:
            # Deleted between the ownership check and the write.
            raise NotFound()
        logger.info("User %s updated document %d", identity, doc_id)
        return updated

    def delete(self, identity: str, doc_id: int) -> None:
        """Delete one of the caller's documents and release its stored file.

        A failure to release the file is logged; the record stays deleted.

        Raises:
            NotFound: No such document, or it belongs to another user.
        """
        document = self._owned(identity, doc_id)
        if not self.documents.delete(doc_id, identity):
            raise NotFound()
        logger.info("User %s deleted document %d", identity, doc_id)

        try:
            self.files.release(document.file_ref)
        except StorageError as exc:
            logger.error(
                "Document %d deleted but its file %s was not released: %s",
                doc_id,
                document.file_ref,
                exc,
            )

    def _owned(self, identity: str, doc_id: int) -> Document:
        document = self.documents.get(doc_id)
        if document is None:
            raise NotFound()
        if document.owner != identity:
            logger.warning(
                "User %s attempted to access document %d owned by another user",
                identity,
                doc_id,
            )
            raise Forbidden()
        return document
