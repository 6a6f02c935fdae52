"""FastAPI application for the ScanVault document service.

Provides registration and login, scan upload with OCR, and owner-only
document listing, editing and deletion.
"""

import shutil
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

import torch
from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scanvault import __version__
from scanvault.errors import ModelLoadError, ScanVaultError
from scanvault.pipeline.ingestion import UploadedFile
from scanvault.services import Services
from scanvault.utils.logger import get_logger

from .deps import get_services
from .schemas import (
    CredentialsRequest,
    DocumentResponse,
    DocumentUpdateRequest,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    TokenResponse,
)
from .security import Identity

logger = get_logger(__name__)

ServicesDep = Annotated[Services, Depends(get_services)]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Optionally load the OCR model before serving the first request."""
    services = app.dependency_overrides.get(get_services, get_services)()
    if services.config.model.preload:
        try:
            await run_in_threadpool(services.registry.get_model)
        except ModelLoadError as exc:
            logger.error("Model preload failed, will retry on first scan: %s", exc)
    yield


app = FastAPI(
    title="ScanVault API",
    description="Upload scanned documents, extract their text, and manage them",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status: {"model": ErrorResponse} for status in (400, 401, 404, 409, 415, 500)
}


@app.exception_handler(ScanVaultError)
async def handle_service_error(request: Request, exc: ScanVaultError) -> JSONResponse:
    """Render a service error as ``{code, detail}`` with its status."""
    detail = exc.public_message if exc.status_code >= 500 else str(exc)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(code=exc.code, detail=detail).model_dump(),
        headers=headers,
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            code=ScanVaultError.code, detail=ScanVaultError.public_message
        ).model_dump(),
    )


@app.get("/health", response_model=HealthResponse)
def health_check(services: ServicesDep) -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        model_state=services.registry.state.value,
        tesseract_available=shutil.which("tesseract") is not None,
        gpu_available=torch.cuda.is_available(),
    )


@app.post("/register", response_model=MessageResponse, responses=_ERROR_RESPONSES)
def register(body: CredentialsRequest, services: ServicesDep) -> MessageResponse:
    """Create an account. Does not log the user in."""
    services.sessions.register(body.username, body.password)
    return MessageResponse(message="User registered successfully")


@app.post("/login", response_model=TokenResponse, responses=_ERROR_RESPONSES)
def login(body: CredentialsRequest, services: ServicesDep) -> TokenResponse:
    """Exchange a username and password for a bearer token."""
    return TokenResponse(token=services.sessions.login(body.username, body.password))


@app.post("/scan", response_model=DocumentResponse, responses=_ERROR_RESPONSES)
def scan_document(
    identity: Identity,
    services: ServicesDep,
    file: Annotated[UploadFile | None, File()] = None,
    title: Annotated[str | None, Form(max_length=255)] = None,
) -> DocumentResponse:
    """Upload a scan, recognise its text and store it as a new document.

    Args:
        identity: Verified username of the caller.
        services: Shared service components.
        file: Uploaded image (PNG, JPEG, TIFF, ...) or PDF scan.
        title: Document title; defaults to the file name.

    Returns:
        The stored document.
    """
    upload = None
    if file is not None:
        upload = UploadedFile(
            filename=file.filename or "upload",
            data=file.file.read(),
            content_type=file.content_type,
        )
    document = services.pipeline.scan(identity, upload, title)
    return DocumentResponse.from_document(document)


@app.get("/documents", response_model=list[DocumentResponse])
def list_documents(identity: Identity, services: ServicesDep) -> list[DocumentResponse]:
    """List the caller's documents."""
    return [DocumentResponse.from_document(d) for d in services.gateway.list(identity)]


@app.get(
    "/documents/{doc_id}", response_model=DocumentResponse, responses=_ERROR_RESPONSES
)
def get_document(doc_id: int, identity: Identity, services: ServicesDep) -> DocumentResponse:
    return DocumentResponse.from_document(services.gateway.get(identity, doc_id))


@app.put(
    "/documents/{doc_id}", response_model=DocumentResponse, responses=_ERROR_RESPONSES
)
def update_document(
    doc_id: int,
    body: DocumentUpdateRequest,
    identity: Identity,
    services: ServicesDep,
) -> DocumentResponse:
    """Edit the title and/or content of one of the caller's documents."""
    document = services.gateway.update(
        identity, doc_id, title=body.title, content=body.content
    )
    return DocumentResponse.from_document(document)


@app.delete(
    "/documents/{doc_id}", response_model=MessageResponse, responses=_ERROR_RESPONSES
)
def delete_document(doc_id: int, identity: Identity, services: ServicesDep) -> MessageResponse:
    """Delete one of the caller's documents and its stored file."""
    services.gateway.delete(identity, doc_id)
    return MessageResponse(message="Document deleted")
