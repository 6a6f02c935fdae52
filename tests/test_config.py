"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from scanvault.utils.config import (
    CONFIG_PATH_ENV,
    SECRET_KEY_ENV,
    AppConfig,
    AuthConfig,
    ModelConfig,
    StorageConfig,
    load_config,
)


class TestAuthConfig:
    """Tests for AuthConfig defaults and validation."""

    def test_defaults(self) -> None:
        cfg = AuthConfig()
        assert cfg.algorithm == "HS256"
        assert cfg.token_ttl_minutes == 60

    def test_ttl_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AuthConfig(token_ttl_minutes=0)


class TestStorageConfig:
    def test_defaults(self) -> None:
        cfg = StorageConfig()
        assert cfg.database_url == "sqlite:///scanvault.db"
        assert cfg.upload_dir == "uploads"


class TestModelConfig:
    """Tests for ModelConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = ModelConfig()
        assert cfg.backend == "tesseract"
        assert cfg.lang == "eng"
        assert cfg.psm == 3
        assert cfg.pdf_dpi == 300
        assert cfg.tesseract_cmd is None
        assert cfg.preload is False

    def test_unknown_backend_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ModelConfig(backend="easyocr")


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.auth, AuthConfig)
        assert isinstance(cfg.storage, StorageConfig)
        assert isinstance(cfg.model, ModelConfig)
        assert cfg.log_level == "INFO"


class TestLoadConfig:
    """Tests for the load_config function."""

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
        monkeypatch.delenv(SECRET_KEY_ENV, raising=False)

    def test_load_repository_config(self, project_root: Path) -> None:
        cfg = load_config(project_root / "configs" / "config.yaml")
        assert cfg.model.backend == "tesseract"
        assert cfg.auth.token_ttl_minutes == 60

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert cfg == AppConfig()

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "auth": {"token_ttl_minutes": 15},
            "model": {"backend": "trocr", "device": "cpu"},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.auth.token_ttl_minutes == 15
        assert cfg.model.backend == "trocr"
        assert cfg.model.device == "cpu"
        assert cfg.log_level == "DEBUG"

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert isinstance(load_config(config_file), AppConfig)

    def test_path_from_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "env.yaml"
        config_file.write_text("log_level: WARNING\n")
        monkeypatch.setenv(CONFIG_PATH_ENV, str(config_file))
        assert load_config().log_level == "WARNING"

    def test_secret_key_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(SECRET_KEY_ENV, "from-the-environment")
        cfg = load_config(Path("/nonexistent/config.yaml"))
        assert cfg.auth.secret_key == "from-the-environment"
