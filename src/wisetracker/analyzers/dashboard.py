"""
Dashboard analytics — every derivation for one view of the cached data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from wisetracker.analyzers.alerts import Alert, evaluate_alerts
from wisetracker.analyzers.budget import BudgetMetrics, compute_budget_metrics
from wisetracker.analyzers.categories import CategorySpend, category_breakdown
from wisetracker.analyzers.forecast import ForecastDay, ForecastSummary, spending_forecast, summarize_forecast
from wisetracker.analyzers.insights import Insight, generate_insights
from wisetracker.analyzers.trends import TrendPoint, daily_trends

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from wisetracker.models.financial import Balance, DailyBucket, DataWindow, Transaction

logger = logging.getLogger("wisetracker.analyzers.dashboard")


@dataclass
class DashboardAnalytics:
    budget: BudgetMetrics
    forecast_summary: ForecastSummary
    categories: list[CategorySpend] = field(default_factory=list)
    trends: list[TrendPoint] = field(default_factory=list)
    forecast: list[ForecastDay] = field(default_factory=list)
    alerts: list[Alert] = field(default_factory=list)
    insights: list[Insight] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "budget": self.budget.to_dict(),
            "categories": [c.to_dict() for c in self.categories],
            "trends": [t.to_dict() for t in self.trends],
            "forecast": [d.to_dict() for d in self.forecast],
            "forecastSummary": self.forecast_summary.to_dict(),
            "alerts": [a.to_dict() for a in self.alerts],
            "insights": [i.to_dict() for i in self.insights],
        }


def build_dashboard(
    transactions: Sequence[Transaction],
    daily_totals: Mapping[str, DailyBucket],
    balance: Balance | None,
    window: DataWindow,
    currency: str,
    now: datetime | None = None,
) -> DashboardAnalytics:
    """Run all analyzers over one set of transactions and buckets.

    *now* fixes the clock for the budget and forecast; it defaults to the
    current UTC time.
    """
    now = now or datetime.now(timezone.utc)
    today = now.date()

    metrics = compute_budget_metrics(daily_totals, balance, window, currency, now=now)
    categories = category_breakdown(transactions)
    trends = daily_trends(daily_totals)
    forecast = spending_forecast(daily_totals, metrics, today=today)

    analytics = DashboardAnalytics(
        budget=metrics,
        forecast_summary=summarize_forecast(forecast, metrics),
        categories=categories,
        trends=trends,
        forecast=forecast,
        alerts=evaluate_alerts(metrics, daily_totals, categories, today=today),
        insights=generate_insights(metrics, categories, trends),
    )
    logger.debug(
        "Dashboard: %d categories, %d trend days, %d alerts",
        len(categories),
        len(trends),
        len(analytics.alerts),
    )
    return analytics
