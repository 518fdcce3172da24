"""Application configuration helpers."""

from __future__ import annotations

from .cellar import DEFAULT_OWNER_ID, CellarConfig, get_cellar_config
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_OWNER_ID",
    "CellarConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "get_cellar_config",
    "get_database_config",
    "get_storage_config",
]
