"""
Conversion engine and the session state it drives.

- convert(): resolve a rate (primary, then fallback) and multiply
- ConverterController: owns ConverterState and only mutates it through
  action handlers (catalog loaded, conversion requested/completed)
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from currency_converter.domain.models import UNAVAILABLE, Transaction
from currency_converter.services.history import record_conversion
from currency_converter.tools.fx import fetch_conversion_rate, fetch_currencies, normalize_code

logger = logging.getLogger(__name__)

Result = Union[float, str]
RateFetcher = Callable[[str, str], Optional[float]]


def normalize_amount(value: Any) -> float:
    """Coerce form input to a finite float; anything else becomes 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def _now() -> str:
    # Follows the process locale; entry points call use_system_locale()
    return datetime.now().strftime("%x, %X")


async def convert(
    from_code: str,
    to_code: str,
    amount: Any,
    fetch_rate: RateFetcher = fetch_conversion_rate,
) -> Optional[Result]:
    """
    Returns amount * rate, or UNAVAILABLE when no source has the rate.

    Non-numeric amounts count as 0. Returns None without fetching when
    either currency is missing.

    The blocking HTTP lookup runs in a worker thread so the event loop
    stays free while it is in flight.
    """
    from_code = normalize_code(from_code)
    to_code = normalize_code(to_code)
    if not from_code or not to_code:
        return None
    amount = normalize_amount(amount)

    rate = await asyncio.to_thread(fetch_rate, from_code, to_code)
    if rate is None:
        logger.warning("No rate for %s -> %s from any source", from_code, to_code)
        return UNAVAILABLE
    return amount * rate


@dataclass
class ConverterState:
    currencies: Dict[str, str] = field(default_factory=dict)
    from_code: str = ""
    to_code: str = ""
    amount: float = 1.0
    converted: Optional[Result] = None
    transactions: List[Transaction] = field(default_factory=list)


class ConverterController:
    """
    Top-level owner of the session state.

    Overlapping conversions race: by default whichever completes last wins
    the display, and history follows completion order. With
    latest_only=True each request carries a sequence token and stale
    completions are dropped.
    """

    def __init__(
        self,
        catalog_loader: Callable[[], Dict[str, str]] = fetch_currencies,
        rate_fetcher: RateFetcher = fetch_conversion_rate,
        latest_only: bool = False,
        clock: Callable[[], str] = _now,
    ):
        self.state = ConverterState()
        self._catalog_loader = catalog_loader
        self._rate_fetcher = rate_fetcher
        self._latest_only = latest_only
        self._clock = clock
        self._issued = 0

    # -----------------------------
    # Catalog
    # -----------------------------
    async def load_catalog(self) -> Dict[str, str]:
        catalog = await asyncio.to_thread(self._catalog_loader)
        self.on_catalog_loaded(catalog)
        return self.state.currencies

    def on_catalog_loaded(self, catalog: Dict[str, str]) -> None:
        self.state.currencies = dict(catalog or {})
        logger.info("Currency catalog loaded with %d entries", len(self.state.currencies))

    def currency_options(self) -> List[Tuple[str, str]]:
        return [
            (code, f"{code.upper()} - {name}")
            for code, name in self.state.currencies.items()
        ]

    # -----------------------------
    # User actions
    # -----------------------------
    def select_from(self, code: str) -> None:
        self.state.from_code = normalize_code(code)

    def select_to(self, code: str) -> None:
        self.state.to_code = normalize_code(code)

    def set_amount(self, raw: Any) -> None:
        self.state.amount = normalize_amount(raw)

    # -----------------------------
    # Conversion
    # -----------------------------
    async def request_conversion(self) -> Optional[Result]:
        """
        Convert the current selection.

        Returns None (and fetches nothing) when a currency is not selected.
        """
        from_code = self.state.from_code
        to_code = self.state.to_code
        amount = self.state.amount
        if not from_code or not to_code:
            return None

        self._issued += 1
        token = self._issued
        result = await convert(from_code, to_code, amount, fetch_rate=self._rate_fetcher)
        if result is None:
            return None
        self.on_conversion_complete(from_code, to_code, amount, result, token)
        return result

    def on_conversion_complete(
        self,
        from_code: str,
        to_code: str,
        amount: float,
        result: Result,
        token: Optional[int] = None,
    ) -> None:
        if self._latest_only and token is not None and token != self._issued:
            logger.info("Dropping stale conversion %s -> %s (request %d)", from_code, to_code, token)
            return

        self.state.converted = result
        if result == UNAVAILABLE:
            return

        tx = Transaction(
            from_code=from_code,
            to_code=to_code,
            amount=amount,
            result=result,
            date=self._clock(),
        )
        self.state.transactions = record_conversion(self.state.transactions, tx)

    def converted_label(self) -> str:
        return f"Converted Amount: {self.state.converted}"
