"""
Daily Aggregator — group transactions into per-day buckets.

The day key is the text before the ``T`` of the transaction timestamp, so a
transaction keeps the calendar day of whatever zone the provider wrote it in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from wisetracker.models.financial import DailyBucket

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from wisetracker.models.financial import Transaction

logger = logging.getLogger("wisetracker.processing.aggregator")

TWO_PLACES = Decimal("0.01")


@dataclass
class _Accumulator:
    currency: str
    total: Decimal = Decimal(0)
    count: int = 0
    transactions: list[Transaction] = field(default_factory=list)


def day_key(timestamp: str) -> str:
    """``"2025-12-02T10:15:00Z"`` -> ``"2025-12-02"``."""
    return timestamp.split("T")[0]


def round_total(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def aggregate_daily(transactions: Iterable[Transaction]) -> dict[str, DailyBucket]:
    """Build the date -> :class:`DailyBucket` mapping.

    The bucket currency is taken from the first transaction of the day. Later
    transactions in a different currency are still summed into the same total;
    that case is logged rather than rejected.

    The mapping carries no ordering guarantee. Use :func:`sorted_days` when
    presenting it.
    """
    groups: dict[str, _Accumulator] = {}

    for txn in transactions:
        key = day_key(txn.date)
        acc = groups.get(key)
        if acc is None:
            acc = groups[key] = _Accumulator(currency=txn.currency)
        elif txn.currency != acc.currency:
            logger.warning(
                "Mixed currencies on %s: %s summed into a %s total",
                key,
                txn.currency,
                acc.currency,
            )
        acc.total += txn.amount
        acc.count += 1
        acc.transactions.append(txn)

    return {
        key: DailyBucket(
            total=round_total(acc.total),
            count=acc.count,
            currency=acc.currency,
            transactions=acc.transactions,
        )
        for key, acc in groups.items()
    }


def sorted_days(daily_totals: Mapping[str, DailyBucket], *, descending: bool = False) -> list[str]:
    """Day keys in calendar order."""
    return sorted(daily_totals, reverse=descending)


def total_spent(daily_totals: Mapping[str, DailyBucket]) -> Decimal:
    """Sum of all bucket totals."""
    return sum((bucket.total for bucket in daily_totals.values()), Decimal(0))
