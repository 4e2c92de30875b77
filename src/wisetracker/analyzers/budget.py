"""
Budget metrics — how much of the money available for the window is spent.

The budget for a window is what is still in the account plus what has
already gone out of it: ``total = balance.current + spent``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from wisetracker.processing.aggregator import total_spent
from wisetracker.processing.window import parse_timestamp

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wisetracker.models.financial import Balance, DailyBucket, DataWindow

logger = logging.getLogger("wisetracker.analyzers.budget")

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class BudgetMetrics:
    """Budget position for one data window."""

    total_budget: float
    spent: float
    current_balance: float
    spent_percentage: float  # rounded to 1 decimal
    days_remaining: int
    total_days: int
    budget_per_day: float
    currency: str
    has_transactions: bool = False

    @property
    def elapsed_days(self) -> int:
        return self.total_days - self.days_remaining

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalBudget": self.total_budget,
            "spent": self.spent,
            "currentBalance": self.current_balance,
            "spentPercentage": self.spent_percentage,
            "daysRemaining": self.days_remaining,
            "totalDays": self.total_days,
            "budgetPerDay": self.budget_per_day,
            "currency": self.currency,
            "hasTransactions": self.has_transactions,
        }


def _days_between(earlier: datetime, later: datetime) -> int:
    return math.ceil((later - earlier) / ONE_DAY)


def compute_budget_metrics(
    daily_totals: Mapping[str, DailyBucket],
    balance: Balance | None,
    window: DataWindow,
    currency: str,
    now: datetime | None = None,
) -> BudgetMetrics:
    """Compute :class:`BudgetMetrics` for *window* as of *now* (UTC).

    Window dates are midnight UTC, so on the last day of the window
    ``days_remaining`` is already 0.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    spent = float(total_spent(daily_totals))
    current = float(balance.current) if balance is not None else 0.0
    total_budget = current + spent
    spent_percentage = round(spent / total_budget * 100, 1) if total_budget > 0 else 0.0

    start = parse_timestamp(window.start)
    end = parse_timestamp(window.end)
    days_remaining = max(0, _days_between(now, end))
    total_days = _days_between(start, end)
    budget_per_day = current / days_remaining if days_remaining > 0 else 0.0

    logger.debug(
        "Budget %.2f, spent %.2f (%.1f%%), %d of %d days remaining",
        total_budget,
        spent,
        spent_percentage,
        days_remaining,
        total_days,
    )

    return BudgetMetrics(
        total_budget=total_budget,
        spent=spent,
        current_balance=current,
        spent_percentage=spent_percentage,
        days_remaining=days_remaining,
        total_days=total_days,
        budget_per_day=budget_per_day,
        currency=currency,
        has_transactions=any(bucket.count for bucket in daily_totals.values()),
    )
