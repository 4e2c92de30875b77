"""
Dataset builder — run the full pipeline over one provider snapshot.

    activities -> dedupe -> card payments -> normalize
               -> sort newest first -> dedupe -> aggregate by day
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from wisetracker.models.financial import CachedDataset
from wisetracker.processing.aggregator import aggregate_daily
from wisetracker.processing.dedup import dedupe_with_count
from wisetracker.processing.normalizer import DEFAULT_FALLBACK_CURRENCY, normalize_activities
from wisetracker.processing.window import parse_timestamp

if TYPE_CHECKING:
    from wisetracker.connectors.base import ProviderSnapshot
    from wisetracker.models.financial import DataWindow, Transaction

logger = logging.getLogger("wisetracker.processing.builder")

_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def _sort_key(txn: Transaction) -> datetime:
    try:
        return parse_timestamp(txn.date)
    except ValueError:
        return _UNDATED


def sort_newest_first(transactions: list[Transaction]) -> list[Transaction]:
    """Sort by parsed timestamp, newest first; undated transactions go last."""
    return sorted(transactions, key=_sort_key, reverse=True)


def build_dataset(
    snapshot: ProviderSnapshot,
    window: DataWindow,
    *,
    fallback_currency: str = DEFAULT_FALLBACK_CURRENCY,
    now: datetime | None = None,
) -> CachedDataset:
    """Produce a complete :class:`CachedDataset` from fetched provider data."""
    activities, removed = dedupe_with_count(snapshot.activities)
    if removed:
        logger.info("Removed %d duplicate activities", removed)

    transactions = sort_newest_first(normalize_activities(activities, fallback_currency))
    logger.info("Found %d card transactions", len(transactions))

    transactions, removed = dedupe_with_count(transactions)
    if removed:
        logger.info("Removed %d duplicate transactions", removed)

    daily_totals = aggregate_daily(transactions)

    dataset = CachedDataset(
        activities=activities,
        transactions=transactions,
        daily_totals=daily_totals,
        balance=snapshot.balance,
        currency=snapshot.currency,
        data_window=window,
        last_updated=now or datetime.now(timezone.utc),
    )
    logger.info(
        "Processed %d transactions across %d days from %d page(s)",
        dataset.transaction_count,
        dataset.day_count,
        snapshot.page_count,
    )
    return dataset
