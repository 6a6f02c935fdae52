"""Application entry point for the ScanVault API server."""

import os
from pathlib import Path

import uvicorn

from scanvault.api.app import app
from scanvault.utils.config import CONFIG_PATH_ENV, load_config
from scanvault.utils.logger import setup_logging


def main(host: str = "0.0.0.0", port: int = 8000, config_path: Path | None = None) -> None:
    """Start the FastAPI application server."""
    if config_path is not None:
        # The API builds its services lazily from the environment.
        os.environ[CONFIG_PATH_ENV] = str(config_path)
    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
