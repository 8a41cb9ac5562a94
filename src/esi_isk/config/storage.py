"""Where the ledger database lives."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "esi_isk"
DEFAULT_DB_FILENAME: Final[str] = "esi_isk.db"
DATA_DIR_ENV: Final[str] = "ESI_ISK_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Local data directory holding the default SQLite ledger."""

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self, *, create_dir: bool = True) -> Path:
        data_dir = self.resolve_data_dir()
        if create_dir:
            data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir / self.database_filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str

    @classmethod
    def for_sqlite_file(cls, path: Path) -> DatabaseConfig:
        return cls(uri=f"sqlite+pysqlite:///{path}")


def default_data_dir() -> Path:
    xdg_data_home = optional_env_var("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
    return base / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    explicit = optional_env_var(DATA_DIR_ENV)
    return StorageConfig(data_dir=Path(explicit) if explicit else default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file inside the data directory."""

    uri = optional_env_var(DATABASE_URI_ENV)
    if uri:
        return DatabaseConfig(uri=uri)
    storage_config = storage or get_storage_config()
    return DatabaseConfig.for_sqlite_file(storage_config.database_path())
