"""Data models for WiseTracker."""

from wisetracker.models.financial import (
    Balance,
    CachedDataset,
    CamelModel,
    DailyBucket,
    DataWindow,
    Money,
    RawActivity,
    Transaction,
)

__all__ = [
    "Balance",
    "CachedDataset",
    "CamelModel",
    "DailyBucket",
    "DataWindow",
    "Money",
    "RawActivity",
    "Transaction",
]
