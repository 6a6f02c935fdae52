"""Local filesystem store for uploaded scan bytes.

Files are addressed by an opaque reference: a random hex prefix joined to
the sanitised upload name. References never contain path separators.
"""

import uuid
from pathlib import Path

from werkzeug.utils import secure_filename

from scanvault.errors import StorageError
from scanvault.utils.logger import get_logger

logger = get_logger(__name__)

_MAX_NAME_LENGTH = 128


class LocalFileStore:
    """Stores uploaded files under a single directory.

    Args:
        root: Directory holding the stored files. Created on first write.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def save(self, data: bytes, filename: str) -> str:
        """Write ``data`` and return its file reference.

        Raises:
            StorageError: If the file cannot be written.
        """
        name = secure_filename(filename) or "upload"
        if len(name) > _MAX_NAME_LENGTH:
            suffix = Path(name).suffix[:16]
            name = name[: _MAX_NAME_LENGTH - len(suffix)] + suffix
        file_ref = f"{uuid.uuid4().hex}_{name}"
        path = self.root / file_ref
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            logger.error("Failed to store %s: %s", file_ref, exc)
            raise StorageError() from exc
        logger.info("Stored %d bytes as %s", len(data), file_ref)
        return file_ref

    def read(self, file_ref: str) -> bytes:
        try:
            return self._path_for(file_ref).read_bytes()
        except OSError as exc:
            logger.error("Failed to read %s: %s", file_ref, exc)
            raise StorageError() from exc

    def release(self, file_ref: str) -> None:
        """Delete the stored file behind ``file_ref``.

        Raises:
            StorageError: If the file is missing or cannot be removed.
        """
        try:
            self._path_for(file_ref).unlink()
        except OSError as exc:
            raise StorageError(f"Could not release {file_ref}: {exc}") from exc
        logger.info("Released stored file %s", file_ref)

    def exists(self, file_ref: str) -> bool:
        return self._path_for(file_ref).is_file()

    def _path_for(self, file_ref: str) -> Path:
        if not file_ref or Path(file_ref).name != file_ref or file_ref in (".", ".."):
            raise StorageError(f"Malformed file reference: {file_ref!r}")
        return self.root / file_ref
