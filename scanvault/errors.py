"""Error taxonomy for the ScanVault service.

Every failure a caller can observe is a subclass of :class:`ScanVaultError`
carrying a stable HTTP status, a machine-readable code and a public message
that never includes internal identifiers.
"""


class ScanVaultError(Exception):
    """Base class for all service-level failures."""

    status_code: int = 500
    code: str = "InternalError"
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)


# Auth layer


class Unauthorized(ScanVaultError):
    status_code = 401
    code = "Unauthorized"
    public_message = "Authentication required"


class InvalidToken(ScanVaultError):
    status_code = 401
    code = "InvalidToken"
    public_message = "Invalid authentication token"


class TokenExpired(ScanVaultError):
    status_code = 401
    code = "TokenExpired"
    public_message = "Authentication token has expired"


# Identity layer


class DuplicateUser(ScanVaultError):
    status_code = 409
    code = "DuplicateUser"
    public_message = "Username is already registered"


class InvalidCredentials(ScanVaultError):
    status_code = 401
    code = "InvalidCredentials"
    public_message = "Invalid username or password"


# Ingestion layer


class MissingFile(ScanVaultError):
    status_code = 400
    code = "MissingFile"
    public_message = "No file was uploaded"


class UnsupportedFileType(ScanVaultError):
    status_code = 415
    code = "UnsupportedFileType"
    public_message = "Unsupported file type"


class StorageError(ScanVaultError):
    status_code = 500
    code = "StorageError"
    public_message = "Storage operation failed"


class ModelLoadError(ScanVaultError):
    status_code = 500
    code = "ModelLoadError"
    public_message = "OCR model is unavailable"


class InferenceError(ScanVaultError):
    status_code = 500
    code = "InferenceError"
    public_message = "Text recognition failed"


# Ownership-scoped CRUD


class NotFound(ScanVaultError):
    status_code = 404
    code = "NotFound"
    public_message = "Document not found"


class Forbidden(NotFound):
    """Document exists but belongs to another user.

    Rendered exactly like :class:`NotFound` so that non-owners cannot probe
    for the existence of other users' documents.
    """
