"""
Configuration for the part weight service.

The resolver never reads the environment itself. Build a config once at the
boundary and pass it in:

    config = WeightServiceConfig.from_env()
    resolver = PartWeightResolver.from_config(config)
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
from typing import Mapping, Optional

from part_weight.errors import ConfigurationError

DEFAULT_SEARCH_URL = "https://api.mouser.com/api/v1/search/partnumber"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

_TRUE_TOKENS = {"1", "true", "yes", "on"}
_FALSE_TOKENS = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class WeightServiceConfig:
    mouser_api_key: str
    search_url: str = DEFAULT_SEARCH_URL
    search_options: str = "None"  # Mouser partSearchOptions: None | Exact
    search_timeout_seconds: float = 10.0
    page_timeout_seconds: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT
    accept_language: str = "en-US,en;q=0.9"
    enable_html_scrape: bool = True
    enable_package_inference: bool = True

    def __repr__(self) -> str:
        return f"WeightServiceConfig(search_url={self.search_url!r}, mouser_api_key='***')"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "WeightServiceConfig":
        env = os.environ if environ is None else environ
        api_key = (env.get("MOUSER_API_KEY") or "").strip()
        if not api_key:
            raise ConfigurationError("MOUSER_API_KEY not set")

        return cls(
            mouser_api_key=api_key,
            search_url=(env.get("MOUSER_SEARCH_URL") or "").strip() or DEFAULT_SEARCH_URL,
            search_timeout_seconds=_env_float(env, "PART_WEIGHT_SEARCH_TIMEOUT", 10.0),
            page_timeout_seconds=_env_float(env, "PART_WEIGHT_PAGE_TIMEOUT", 10.0),
            enable_html_scrape=_env_bool(env, "PART_WEIGHT_HTML_SCRAPE", True),
            enable_package_inference=_env_bool(env, "PART_WEIGHT_PACKAGE_INFERENCE", True),
        )


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = (env.get(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE_TOKENS:
        return True
    if raw in _FALSE_TOKENS:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")
