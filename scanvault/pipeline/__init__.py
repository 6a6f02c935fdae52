"""Document ingestion and ownership-scoped document access."""

from .documents import DocumentGateway
from .ingestion import ACCEPTED_CONTENT_TYPES, IngestionPipeline, UploadedFile

__all__ = [
    "ACCEPTED_CONTENT_TYPES",
    "DocumentGateway",
    "IngestionPipeline",
    "UploadedFile",
]
