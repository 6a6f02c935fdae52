"""FastAPI dependency providing the shared service components."""

from functools import lru_cache

from scanvault.services import Services, build_services
from scanvault.utils.config import load_config


@lru_cache(maxsize=1)
def get_services() -> Services:
    """Build the service components once per process from the loaded config."""
    return build_services(load_config())
