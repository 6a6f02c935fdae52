"""Scan ingestion: store the upload, recognise its text, persist a document.

The pipeline is one logical transaction across two backends (file bytes and
document metadata). A failure before the file is stored leaves no trace; a
failure after it leaves the stored file in place but never a document
record pointing at nothing.
"""

from dataclasses import dataclass

from scanvault.errors import (
    InferenceError,
    MissingFile,
    ModelLoadError,
    UnsupportedFileType,
)
from scanvault.ocr.models import OCRModel
from scanvault.ocr.pages import PageLoader
from scanvault.ocr.registry import ModelRegistry
from scanvault.storage.files import LocalFileStore
from scanvault.storage.repositories import Document, DocumentRepository
from scanvault.utils.logger import get_logger

logger = get_logger(__name__)

ACCEPTED_CONTENT_TYPES = frozenset(
    {
        "image/png",
        "image/jpeg",
        "image/tiff",
        "image/bmp",
        "image/gif",
        "image/webp",
        "application/pdf",
        "application/octet-stream",
    }
)

PAGE_BREAK = "\n\n--- Page Break ---\n\n"
MAX_TITLE_LENGTH = 255


@dataclass
class UploadedFile:
    """An uploaded scan as received from the client."""

    filename: str
    data: bytes
    content_type: str | None = None


class IngestionPipeline:
    """Turns an uploaded scan into a stored, owned document.

    Args:
        files: Store for the raw upload bytes.
        documents: Repository for document metadata.
        registry: Source of the OCR model.
        page_loader: Decoder from bytes to page images.
    """

    def __init__(
        self,
        files: LocalFileStore,
        documents: DocumentRepository,
        registry: ModelRegistry,
        page_loader: PageLoader | None = None,
    ) -> None:
        self.files = files
        self.documents = documents
        self.registry = registry
        self.page_loader = page_loader or PageLoader()

    def scan(
        self,
        identity: str,
        upload: UploadedFile | None,
        title: str | None = None,
    ) -> Document:
        """Store, recognise and persist an uploaded scan for ``identity``.

        Args:
            identity: Verified username of the caller; becomes the owner.
            upload: The uploaded file, or ``None`` if the request had none.
            title: Document title. Blank titles fall back to the file name.

        Returns:
            The persisted document, including its assigned id.

        Raises:
            MissingFile: No upload, or an empty one.
            UnsupportedFileType: The declared content type is not a scan format.
            StorageError: Writing the file or the record failed.
            ModelLoadError: The OCR model could not be loaded.
            InferenceError: The scan could not be decoded or recognised.
        """
        self._validate(upload)

        file_ref = self.files.save(upload.data, upload.filename)
        try:
            model = self.registry.get_model()
        except ModelLoadError:
            logger.warning("Stored file %s left without a document", file_ref)
            raise
        content = self._recognise(model, file_ref)

        title = ((title or "").strip() or upload.filename or "Untitled")[:MAX_TITLE_LENGTH]
        document = self.documents.add(
            owner=identity, title=title, content=content, file_ref=file_ref
        )
        logger.info(
            "Stored document %d for %s (%d characters recognised)",
            document.id,
            identity,
            len(content),
        )
        return document

    def _validate(self, upload: UploadedFile | None) -> None:
        if upload is None or not upload.data:
            raise MissingFile()
        if upload.content_type:
            media_type = upload.content_type.split(";", 1)[0].strip().lower()
            if media_type not in ACCEPTED_CONTENT_TYPES:
                raise UnsupportedFileType(f"Unsupported file type: {media_type}")

    def _recognise(self, model: OCRModel, file_ref: str) -> str:
        data = self.files.read(file_ref)
        try:
            pages = self.page_loader.load(data)
            texts = [(model.infer(page) or "").strip() for page in pages]
        except Exception as exc:
            logger.error("Inference failed for %s: %s", file_ref, exc)
            logger.warning("Stored file %s left without a document", file_ref)
            raise InferenceError() from exc
        return PAGE_BREAK.join(text for text in texts if text)
