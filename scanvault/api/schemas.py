"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from scanvault.storage.repositories import Document


class CredentialsRequest(BaseModel):
    """Username and password for registration and login."""

    username: str = Field(min_length=1, max_length=150)
    password: str = Field(min_length=1)


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    """Bearer token issued at login."""

    token: str
    token_type: str = "bearer"


class DocumentResponse(BaseModel):
    """Public representation of a stored document."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    owner: str
    title: str
    content: str
    file_ref: str = Field(alias="fileRef")

    @classmethod
    def from_document(cls, document: Document) -> "DocumentResponse":
        return cls(
            id=document.id,
            owner=document.owner,
            title=document.title,
            content=document.content,
            fileRef=document.file_ref,
        )


class DocumentUpdateRequest(BaseModel):
    """Editable document fields; omitted or null fields stay unchanged."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    content: str | None = None


class ErrorResponse(BaseModel):
    code: str
    detail: str


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    model_state: str
    tesseract_available: bool
    gpu_available: bool
