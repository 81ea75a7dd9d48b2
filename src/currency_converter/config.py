"""
Runtime configuration for the currency converter.

Values come from the environment (a local .env file is loaded first),
so the API hosts can be pointed at a mirror without code changes.
"""

from __future__ import annotations

import locale
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


PRIMARY_BASE = "https://cdn.jsdelivr.net/npm/@fawazahmed0/currency-api@latest"
FALLBACK_BASE = "https://latest.currency-api.pages.dev"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class Source:
    name: str
    base_url: str


@dataclass(frozen=True)
class Settings:
    primary_base: str = PRIMARY_BASE
    fallback_base: str = FALLBACK_BASE
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    def sources(self) -> list[Source]:
        """Ordered fallback chain: primary first, then fallback."""
        return [
            Source("primary", self.primary_base),
            Source("fallback", self.fallback_base),
        ]


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        primary_base=(os.getenv("CURRENCY_API_PRIMARY_BASE") or PRIMARY_BASE).rstrip("/"),
        fallback_base=(os.getenv("CURRENCY_API_FALLBACK_BASE") or FALLBACK_BASE).rstrip("/"),
        timeout=_float_env("CURRENCY_API_TIMEOUT", DEFAULT_TIMEOUT),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    # basicConfig is a no-op once the root logger has handlers
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def use_system_locale() -> None:
    """Make %x / %X timestamps follow the user's locale."""
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logging.getLogger(__name__).warning("Keeping default locale: %s", e)
