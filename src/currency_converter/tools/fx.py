from __future__ import annotations

"""
Currency catalog and rate tables from the public currency-api.

Every lookup walks the configured sources in order (primary, then
fallback) and the first structurally valid answer wins. Rates are
volatile, so nothing here is cached.
"""

import logging
import math
from typing import Any, Callable, Optional, TypeVar

import requests

from currency_converter.config import Source, load_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FxSourceError(RuntimeError):
    """A source could not produce a usable JSON document."""


def _get_json(source: Source, path: str, timeout: float) -> Any:
    url = f"{source.base_url}{path}"
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as e:
        raise FxSourceError(f"{source.name} request to {url} failed: {e}") from e
    except ValueError as e:
        raise FxSourceError(f"{source.name} returned malformed JSON from {url}: {e}") from e


def first_valid(
    sources: list[Source],
    path: str,
    extract: Callable[[Any], Optional[T]],
    label: str,
    timeout: float,
) -> Optional[T]:
    """
    Try each source in order and return the first non-None extraction.

    Transport and shape failures are logged and fall through to the next
    source. Returns None when every source fails.
    """
    for source in sources:
        try:
            data = _get_json(source, path, timeout)
        except FxSourceError as e:
            logger.error("Error fetching %s from %s source: %s", label, source.name, e)
            continue

        value = extract(data)
        if value is not None:
            logger.info("Fetched %s from %s source", label, source.name)
            return value
        logger.warning("%s not found in %s source", label, source.name)

    return None


def _catalog(data: Any) -> Optional[dict[str, str]]:
    if not isinstance(data, dict):
        return None
    return {str(code): str(name) for code, name in data.items()}


def _is_rate(value: Any) -> bool:
    # bool is an int subclass, JSON true is not a rate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def extract_rate(data: Any, from_code: str, to_code: str) -> Optional[float]:
    """Resolve data[from_code][to_code] as a number, or None."""
    if not isinstance(data, dict):
        return None
    table = data.get(from_code)
    if not isinstance(table, dict):
        return None
    rate = table.get(to_code)
    return float(rate) if _is_rate(rate) else None


def normalize_code(code: str) -> str:
    return (code or "").strip().lower()


def _resolve(
    sources: Optional[list[Source]], timeout: Optional[float]
) -> tuple[list[Source], float]:
    # Read settings at most once per lookup
    if sources is None or timeout is None:
        settings = load_settings()
        sources = settings.sources() if sources is None else sources
        timeout = settings.timeout if timeout is None else timeout
    return sources, timeout


def fetch_currencies(
    sources: Optional[list[Source]] = None, timeout: Optional[float] = None
) -> dict[str, str]:
    """
    Returns the currency catalog, e.g. {"usd": "US Dollar", "eur": "Euro"}.

    Empty when both sources fail; never raises.
    """
    sources, timeout = _resolve(sources, timeout)
    catalog = first_valid(sources, "/v1/currencies.json", _catalog, "currencies", timeout)
    return catalog if catalog is not None else {}


def fetch_conversion_rate(
    from_code: str,
    to_code: str,
    sources: Optional[list[Source]] = None,
    timeout: Optional[float] = None,
) -> Optional[float]:
    from_code = normalize_code(from_code)
    to_code = normalize_code(to_code)
    if not from_code or not to_code:
        return None
    sources, timeout = _resolve(sources, timeout)

    return first_valid(
        sources,
        f"/v1/currencies/{from_code}.json",
        lambda data: extract_rate(data, from_code, to_code),
        f"conversion rate {from_code} to {to_code}",
        timeout,
    )
