"""Location of the cellar database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "vinboard"
DEFAULT_DB_FILENAME: Final[str] = "vinboard.db"
SQLITE_URI_PREFIX: Final[str] = "sqlite+pysqlite:///"


def _env(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or None


def platform_data_home() -> Path:
    """Per-user data root: ``%LOCALAPPDATA%`` on Windows, ``$XDG_DATA_HOME`` elsewhere."""

    if os.name == "nt":
        override, fallback = _env("LOCALAPPDATA"), Path.home() / "AppData" / "Local"
    else:
        override, fallback = _env("XDG_DATA_HOME"), Path.home() / ".local" / "share"
    return Path(override) if override else fallback


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Directory holding the SQLite cellar file."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_filename

    def database_uri(self, *, create_dir: bool = True) -> str:
        if create_dir:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        return f"{SQLITE_URI_PREFIX}{self.database_path}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def get_storage_config() -> StorageConfig:
    raw_dir = _env("VINBOARD_DATA_DIR")
    data_dir = Path(raw_dir) if raw_dir else platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir.expanduser().resolve())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory, created on demand."""

    uri = _env("DATABASE_URI")
    if uri is None:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri)
