"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .esi import EsiConfig, get_esi_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .ledger import DEFAULT_WINDOW_DAYS, LedgerConfig, get_ledger_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_WINDOW_DAYS",
    "ConfigurationError",
    "DatabaseConfig",
    "EsiConfig",
    "LedgerConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_esi_config",
    "get_ledger_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
