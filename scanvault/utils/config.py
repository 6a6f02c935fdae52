"""Configuration management for ScanVault.

Settings live in a YAML file validated by pydantic models; every field has a
default so the service starts without any file present. Two environment
variables override the file: ``SCANVAULT_CONFIG`` selects the file and
``SCANVAULT_SECRET_KEY`` supplies the token signing key.
"""

import logging
import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("configs/config.yaml")
CONFIG_PATH_ENV = "SCANVAULT_CONFIG"
SECRET_KEY_ENV = "SCANVAULT_SECRET_KEY"


class AuthConfig(BaseModel):
    """Token signing settings."""

    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    token_ttl_minutes: int = Field(default=60, gt=0)


class StorageConfig(BaseModel):
    """Locations of document metadata and uploaded file bytes."""

    database_url: str = "sqlite:///scanvault.db"
    upload_dir: str = "uploads"


class ModelConfig(BaseModel):
    """OCR model selection and inference options."""

    backend: Literal["tesseract", "trocr"] = "tesseract"
    model_name: str = "microsoft/trocr-base-printed"
    device: str | None = None
    tesseract_cmd: str | None = None
    lang: str = "eng"
    psm: int = 3
    pdf_dpi: int = 300
    preload: bool = False


class AppConfig(BaseModel):
    """Top-level application configuration."""

    auth: AuthConfig = Field(default_factory=AuthConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML file. Defaults to ``$SCANVAULT_CONFIG`` or
            ``configs/config.yaml``.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path(os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH))

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        config = AppConfig(**raw)
    else:
        logger.info("No config file found at %s, using defaults", path)
        config = AppConfig()

    secret = os.environ.get(SECRET_KEY_ENV)
    if secret:
        config.auth.secret_key = secret
    return config
