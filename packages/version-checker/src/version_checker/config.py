"""Application settings loaded from environment variables."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from version_checker.constants import (
    API_REQUEST_TIMEOUT,
    DEFAULT_CACHE_TIMEOUT_SECONDS,
    DEFAULT_GC_INTERVAL_SECONDS,
    LOG_FORMAT,
)


class Settings(BaseSettings):
    """version-checker settings.

    All values can be overridden via environment variables with the
    VERSION_CHECKER_ prefix. Example: VERSION_CHECKER_CACHE_TIMEOUT_SECONDS=600
    """

    cache_timeout_seconds: float = DEFAULT_CACHE_TIMEOUT_SECONDS
    gc_interval_seconds: float = DEFAULT_GC_INTERVAL_SECONDS
    default_test_all: bool = False  # check containers without the enable annotation
    image_url_substitution: Optional[str] = None  # sed-style s/pattern/replacement/[g]
    request_timeout_seconds: float = API_REQUEST_TIMEOUT
    log_level: str = "INFO"

    dockerhub_username: Optional[str] = None
    dockerhub_password: Optional[str] = None
    dockerhub_token: Optional[str] = None

    model_config = {"env_prefix": "VERSION_CHECKER_"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with the shared format."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
