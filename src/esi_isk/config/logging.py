"""Root logger setup for the esi-isk command line."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "ESI_ISK_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx logs every request at INFO
_CHATTY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")


def resolve_log_level(default: int = logging.INFO) -> int:
    raw = optional_env_var(LOG_LEVEL_ENV)
    if raw is None:
        return default
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_ENV} must be a logging level name, got {raw!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger.

    Without an explicit ``level`` the ``ESI_ISK_LOG_LEVEL`` variable is consulted,
    falling back to INFO. HTTP client chatter is held at WARNING unless DEBUG was
    requested.
    """

    resolved = resolve_log_level() if level is None else level
    logging.basicConfig(level=resolved, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    chatty_level = resolved if resolved <= logging.DEBUG else max(resolved, logging.WARNING)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)
