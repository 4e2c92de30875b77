"""
Processing pipeline — from raw provider activities to daily buckets.

Everything here is deterministic and free of I/O.
"""

from wisetracker.processing.aggregator import aggregate_daily, day_key, round_total, sorted_days, total_spent
from wisetracker.processing.builder import build_dataset, sort_newest_first
from wisetracker.processing.dedup import dedupe_by_id, dedupe_with_count
from wisetracker.processing.normalizer import (
    CARD_PAYMENT,
    DEFAULT_DESCRIPTION,
    ParsedAmount,
    ParseFailure,
    apply_fallback,
    is_card_payment,
    normalize_activities,
    normalize_activity,
    parse_amount,
    strip_markup,
)
from wisetracker.processing.window import (
    RANGE_END_SENTINEL,
    RANGE_START_SENTINEL,
    WindowSlice,
    filter_window,
    parse_timestamp,
)

__all__ = [
    "CARD_PAYMENT",
    "DEFAULT_DESCRIPTION",
    "RANGE_END_SENTINEL",
    "RANGE_START_SENTINEL",
    "ParseFailure",
    "ParsedAmount",
    "WindowSlice",
    "aggregate_daily",
    "apply_fallback",
    "build_dataset",
    "day_key",
    "dedupe_by_id",
    "dedupe_with_count",
    "filter_window",
    "is_card_payment",
    "normalize_activities",
    "normalize_activity",
    "parse_amount",
    "parse_timestamp",
    "round_total",
    "sort_newest_first",
    "sorted_days",
    "strip_markup",
    "total_spent",
]
