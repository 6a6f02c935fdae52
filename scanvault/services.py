"""Wiring of the service components from an :class:`AppConfig`."""

from dataclasses import dataclass
from datetime import timedelta
from functools import partial

from scanvault.auth import CredentialStore, SessionIssuer
from scanvault.ocr import ModelRegistry, PageLoader, load_model
from scanvault.pipeline import DocumentGateway, IngestionPipeline
from scanvault.storage import Database, DocumentRepository, LocalFileStore, UserRepository
from scanvault.utils.config import AppConfig


@dataclass
class Services:
    """Shared, process-wide service components."""

    config: AppConfig
    database: Database
    sessions: SessionIssuer
    registry: ModelRegistry
    pipeline: IngestionPipeline
    gateway: DocumentGateway


def build_services(config: AppConfig, registry: ModelRegistry | None = None) -> Services:
    """Create the database schema and assemble all components.

    Args:
        config: Application configuration.
        registry: Model registry to use instead of one built from
            ``config.model``.
    """
    database = Database(config.storage.database_url)
    database.create_all()

    users = UserRepository(database)
    documents = DocumentRepository(database)
    files = LocalFileStore(config.storage.upload_dir)

    sessions = SessionIssuer(
        CredentialStore(users),
        secret_key=config.auth.secret_key,
        algorithm=config.auth.algorithm,
        ttl=timedelta(minutes=config.auth.token_ttl_minutes),
    )
    if registry is None:
        registry = ModelRegistry(partial(load_model, config.model))

    pipeline = IngestionPipeline(
        files, documents, registry, PageLoader(dpi=config.model.pdf_dpi)
    )
    gateway = DocumentGateway(documents, files)
    return Services(
        config=config,
        database=database,
        sessions=sessions,
        registry=registry,
        pipeline=pipeline,
        gateway=gateway,
    )
