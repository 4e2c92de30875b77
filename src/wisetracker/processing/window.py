"""
Date-Window Filter — read-only projections of a cached dataset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from wisetracker.errors import DateWindowError
from wisetracker.processing.aggregator import aggregate_daily

if TYPE_CHECKING:
    from wisetracker.models.financial import CachedDataset, DailyBucket, Transaction

logger = logging.getLogger("wisetracker.processing.window")

RANGE_START_SENTINEL = "1900-01-01"
RANGE_END_SENTINEL = "2100-01-01"


@dataclass(frozen=True)
class WindowSlice:
    """Transactions inside a window and the buckets recomputed from them."""

    transactions: list[Transaction]
    daily_totals: dict[str, DailyBucket]


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 date or datetime into an aware UTC datetime.

    Date-only values mean midnight UTC; naive datetimes are taken as UTC.

    Raises:
        ValueError: If *value* is not ISO 8601.
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_bound(value: str | None, default: str, name: str) -> datetime:
    try:
        return parse_timestamp(value or default)
    except ValueError as e:
        raise DateWindowError(f"Invalid {name}: {value!r} is not an ISO 8601 date") from e


def select_between(
    transactions: list[Transaction],
    start: datetime,
    end: datetime,
) -> list[Transaction]:
    """Transactions with ``start <= date <= end``, in their existing order."""
    selected: list[Transaction] = []
    for txn in transactions:
        try:
            when = parse_timestamp(txn.date)
        except ValueError:
            logger.debug("Skipping transaction %s with unparseable date %r", txn.id, txn.date)
            continue
        if start <= when <= end:
            selected.append(txn)
    return selected


def filter_window(
    dataset: CachedDataset,
    start: str | None = None,
    end: str | None = None,
) -> WindowSlice:
    """Slice *dataset* to an inclusive window and re-aggregate.

    Either bound may be omitted; the missing side is open. The dataset itself
    is left untouched.

    Raises:
        DateWindowError: If a bound is given but cannot be parsed.
    """
    lower = _parse_bound(start, RANGE_START_SENTINEL, "start")
    upper = _parse_bound(end, RANGE_END_SENTINEL, "end")

    transactions = select_between(dataset.transactions, lower, upper)
    return WindowSlice(transactions=transactions, daily_totals=aggregate_daily(transactions))
