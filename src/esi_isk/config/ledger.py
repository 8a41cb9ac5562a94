"""Ledger aggregation defaults."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from esi_isk.domain.time_windows import DEFAULT_WINDOW_DAYS

from .env import int_env_var
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class LedgerConfig:
    window_days: int = DEFAULT_WINDOW_DAYS

    @property
    def window(self) -> timedelta:
        return timedelta(days=self.window_days)


def get_ledger_config() -> LedgerConfig:
    window_days = int_env_var("ESI_ISK_WINDOW_DAYS", DEFAULT_WINDOW_DAYS)
    if window_days <= 0:
        raise ConfigurationError("ESI_ISK_WINDOW_DAYS must be positive")
    return LedgerConfig(window_days=window_days)
