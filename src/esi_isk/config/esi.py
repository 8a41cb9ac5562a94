"""ESI (EVE Swagger Interface) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_ESI_BASE_URL = "https://esi.evetech.net"
DEFAULT_ESI_DATASOURCE = "tranquility"
DEFAULT_USER_AGENT = "esi-isk"
ESI_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class EsiConfig:
    datasource: str
    resilience: ResilienceConfig


def get_esi_config() -> EsiConfig:
    base_url = optional_env_var("ESI_BASE_URL") or DEFAULT_ESI_BASE_URL
    datasource = optional_env_var("ESI_DATASOURCE") or DEFAULT_ESI_DATASOURCE
    user_agent = optional_env_var("ESI_USER_AGENT") or DEFAULT_USER_AGENT

    resilience = ResilienceConfig(
        name="esi",
        base_url=base_url.rstrip("/"),
        timeout_seconds=ESI_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
        retry=RetryPolicy(total=3),
        default_headers={"User-Agent": user_agent, "Accept": "application/json"},
    )
    return EsiConfig(datasource=datasource, resilience=resilience)
