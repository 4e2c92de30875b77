"""
Daily trend series for the spending chart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wisetracker.processing.aggregator import sorted_days

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wisetracker.models.financial import DailyBucket

TREND_DAYS = 14


@dataclass(frozen=True)
class TrendPoint:
    date: str
    amount: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "amount": self.amount, "count": self.count}


def daily_trends(daily_totals: Mapping[str, DailyBucket], days: int = TREND_DAYS) -> list[TrendPoint]:
    """The last *days* days that have spending, oldest first.

    Days without any transaction are not filled in.
    """
    keys = sorted_days(daily_totals)[-days:] if days > 0 else []
    return [
        TrendPoint(date=key, amount=float(daily_totals[key].total), count=daily_totals[key].count)
        for key in keys
    ]
