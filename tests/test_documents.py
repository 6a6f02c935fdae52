"""Tests for the ownership-scoped document gateway."""

import logging
from unittest.mock import patch

import pytest

from scanvault.errors import Forbidden, NotFound, StorageError
from scanvault.pipeline.documents import DocumentGateway
from scanvault.pipeline.ingestion import UploadedFile
from scanvault.services import Services
from scanvault.storage.repositories import Document


@pytest.fixture
def gateway(services: Services) -> DocumentGateway:
    return services.gateway


@pytest.fixture
def alice_doc(services: Services, png_bytes: bytes) -> Document:
    services.sessions.register("alice", "pw")
    return services.pipeline.scan(
        "alice", UploadedFile("invoice.png", png_bytes, "image/png"), "Invoice"
    )


class TestList:
    """Tests for DocumentGateway.list."""

    def test_owner_sees_own_documents(self, gateway: DocumentGateway, alice_doc: Document) -> None:
        assert [d.id for d in gateway.list("alice")] == [alice_doc.id]

    def test_other_user_never_sees_them(self, gateway: DocumentGateway, alice_doc: Document) -> None:
        assert gateway.list("bob") == []


class TestGet:
    """Tests for DocumentGateway.get."""

    def test_owner_can_get(self, gateway: DocumentGateway, alice_doc: Document) -> None:
        assert gateway.get("alice", alice_doc.id).title == "Invoice"

    def test_non_owner_gets_not_found(self, gateway: DocumentGateway, alice_doc: Document) -> None:
        with pytest.raises(NotFound):
            gateway.get("bob", alice_doc.id)

    def test_id_beyond_integer_range(self, gateway: DocumentGateway) -> None:
        with pytest.raises(NotFound):
            gateway.get("alice", 2**64)
        with pytest.raises(NotFound):
            gateway.delete("alice", 2**64)


class TestUpdate:
    """Tests for DocumentGateway.update."""

    def test_title_only_leaves_content(self, gateway: DocumentGateway, alice_doc: Document) -> None:
        gateway.update("alice", alice_doc.id, title="x")
        [listed] = gateway.list("alice")
        assert listed.title == "x"
        assert listed.content == alice_doc.content

    def test_content_only_leaves_title(self, gateway: DocumentGateway, alice_doc: Document) -> None:
        updated = gateway.update("alice", alice_doc.id, content="corrected text")
        assert updated.content == "corrected text"
        assert updated.title == "Invoice"

    def test_owner_and_file_ref_unchanged(self, gateway: DocumentGateway, alice_doc: Document) -> None:
        updated = gateway.update("alice", alice_doc.id, title="x", content="y")
        assert updated.owner == "alice"
        assert updated.file_ref == alice_doc.file_ref

    def test_unknown_id(self, gateway: DocumentGateway) -> None:
        with pytest.raises(NotFound) as exc_info:
            gateway.update("alice", 999, title="x")
        assert not isinstance(exc_info.value, Forbidden)

    def test_non_owner_is_forbidden_but_looks_not_found(
        self,
        gateway: DocumentGateway,
        alice_doc: Document,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="scanvault.pipeline.documents"):
            with pytest.raises(Forbidden) as exc_info:
                gateway.update("bob", alice_doc.id, title="mine now")

        assert isinstance(exc_info.value, NotFound)
        assert exc_info.value.code == NotFound.code
        assert str(exc_info.value) == str(NotFound())
        assert "attempted to access" in caplog.text
        assert gateway.get("alice", alice_doc.id).title == "Invoice"


class TestDelete:
    """Tests for DocumentGateway.delete."""

    def test_delete_releases_file(
        self, gateway: DocumentGateway, alice_doc: Document, services: Services
    ) -> None:
        gateway.delete("alice", alice_doc.id)
        assert gateway.list("alice") == []
        assert not services.pipeline.files.exists(alice_doc.file_ref)

    def test_update_after_delete_not_found(self, gateway: DocumentGateway, alice_doc: Document) -> None:
        gateway.delete("alice", alice_doc.id)
        with pytest.raises(NotFound):
            gateway.update("alice", alice_doc.id, title="x")

    def test_non_owner_cannot_delete(
        self, gateway: DocumentGateway, alice_doc: Document, services: Services
    ) -> None:
        with pytest.raises(NotFound):
            gateway.delete("bob", alice_doc.id)
        assert gateway.get("alice", alice_doc.id) is not None
        assert services.pipeline.files.exists(alice_doc.file_ref)

    def test_release_failure_does_not_restore_record(
        self,
        gateway: DocumentGateway,
        alice_doc: Document,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with patch.object(gateway.files, "release", side_effect=StorageError("disk gone")):
            with caplog.at_level(logging.ERROR, logger="scanvault.pipeline.documents"):
                gateway.delete("alice", alice_doc.id)

        assert gateway.list("alice") == []
        assert "was not released" in caplog.text
