from __future__ import annotations

from typing import Sequence

from currency_converter.domain.models import Transaction

HISTORY_LIMIT = 5


# Newest first, oldest falls off past the limit
def record_conversion(history: Sequence[Transaction], tx: Transaction) -> list[Transaction]:
    return [tx, *history][:HISTORY_LIMIT]


def format_transaction(tx: Transaction) -> str:
    return f"{tx.date}: {tx.amount} {tx.from_code.upper()} to {tx.to_code.upper()} = {tx.result}"
