"""
Spending Forecast — the past week plus a weekday-weighted projection.

The projection is one average daily spend scaled by a fixed multiplier for
the day of the week. Weekends and Fridays run hot, Sundays run cold.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from wisetracker.analyzers.trends import daily_trends

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from wisetracker.analyzers.budget import BudgetMetrics
    from wisetracker.analyzers.trends import TrendPoint
    from wisetracker.models.financial import DailyBucket

HISTORY_DAYS = 7
FORECAST_DAYS = 7
AVERAGE_WINDOW = 7
FALLBACK_PACE = 0.8  # share of the daily budget assumed when there is no history

# Keyed by date.weekday(): Monday is 0
WEEKDAY_MULTIPLIERS: dict[int, float] = {
    0: 1.1,
    1: 1.0,
    2: 1.0,
    3: 1.1,
    4: 1.3,
    5: 1.2,
    6: 0.8,
}


class ForecastKind(str, Enum):
    HISTORICAL = "historical"
    TODAY = "today"
    PREDICTED = "predicted"


class BudgetHealth(str, Enum):
    GOOD = "Good"
    CAUTION = "Caution"
    OVER_BUDGET = "Over Budget"


@dataclass(frozen=True)
class ForecastDay:
    date: str
    amount: float
    kind: ForecastKind

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "amount": self.amount, "type": self.kind.value}


@dataclass(frozen=True)
class ForecastSummary:
    predicted_total: float
    projected_total: float
    projected_percentage: float
    health: BudgetHealth

    def to_dict(self) -> dict[str, Any]:
        return {
            "predictedTotal": self.predicted_total,
            "projectedTotal": self.projected_total,
            "projectedPercentage": self.projected_percentage,
            "health": self.health.value,
        }


def average_daily_spend(trends: Sequence[TrendPoint], metrics: BudgetMetrics) -> float:
    """Mean of the last week of trend points, with fallbacks when there are none."""
    recent = list(trends)[-AVERAGE_WINDOW:]
    if recent:
        return sum(point.amount for point in recent) / len(recent)
    if metrics.spent > 0 and metrics.elapsed_days > 0:
        return metrics.spent / metrics.elapsed_days
    return metrics.budget_per_day * FALLBACK_PACE


def spending_forecast(
    daily_totals: Mapping[str, DailyBucket],
    metrics: BudgetMetrics,
    today: date | None = None,
) -> list[ForecastDay]:
    """Seven days of history ending today, then seven predicted days.

    *today* defaults to the current UTC date.
    """
    today = today or datetime.now(timezone.utc).date()
    days: list[ForecastDay] = []

    for offset in range(HISTORY_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        key = day.isoformat()
        bucket = daily_totals.get(key)
        days.append(
            ForecastDay(
                date=key,
                amount=float(bucket.total) if bucket is not None else 0.0,
                kind=ForecastKind.TODAY if offset == 0 else ForecastKind.HISTORICAL,
            )
        )

    average = average_daily_spend(daily_trends(daily_totals), metrics)
    for offset in range(1, FORECAST_DAYS + 1):
        day = today + timedelta(days=offset)
        days.append(
            ForecastDay(
                date=day.isoformat(),
                amount=average * WEEKDAY_MULTIPLIERS[day.weekday()],
                kind=ForecastKind.PREDICTED,
            )
        )

    return days


def summarize_forecast(forecast: Sequence[ForecastDay], metrics: BudgetMetrics) -> ForecastSummary:
    predicted = sum(day.amount for day in forecast if day.kind is ForecastKind.PREDICTED)
    projected = metrics.spent + predicted
    percentage = projected / metrics.total_budget * 100 if metrics.total_budget > 0 else 0.0

    if percentage < 90:
        health = BudgetHealth.GOOD
    elif percentage < 100:
        health = BudgetHealth.CAUTION
    else:
        health = BudgetHealth.OVER_BUDGET

    return ForecastSummary(
        predicted_total=predicted,
        projected_total=projected,
        projected_percentage=round(percentage, 1),
        health=health,
    )
