"""
Spending insights — short observations for the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wisetracker.analyzers.formatting import format_money

if TYPE_CHECKING:
    from collections.abc import Sequence

    from wisetracker.analyzers.budget import BudgetMetrics
    from wisetracker.analyzers.categories import CategorySpend
    from wisetracker.analyzers.trends import TrendPoint

PROJECTION_PACE = 0.8
PROJECTION_RISK_PCT = 90.0


@dataclass(frozen=True)
class Insight:
    icon: str
    title: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"icon": self.icon, "title": self.title, "description": self.description}


def _top_category(top: CategorySpend, metrics: BudgetMetrics) -> Insight:
    share = top.amount / metrics.spent * 100 if metrics.spent > 0 else 0.0
    return Insight(
        icon=top.icon,
        title=f"{top.name} is your biggest expense",
        description=(
            f"{share:.1f}% of spending ({format_money(top.amount, metrics.currency)}) "
            f"across {top.count} transactions"
        ),
    )


def _daily_average(trends: Sequence[TrendPoint], metrics: BudgetMetrics) -> Insight:
    average = metrics.spent / len(trends)
    comparison = "under" if metrics.budget_per_day > average else "over"
    difference = abs(metrics.budget_per_day - average)
    return Insight(
        icon="🟢" if comparison == "under" else "🟡",
        title=f"Daily spending is {comparison} target",
        description=(
            f"Averaging {format_money(average, metrics.currency)} per day, "
            f"{format_money(difference, metrics.currency)} {comparison} your daily budget target"
        ),
    )


def _projection(metrics: BudgetMetrics) -> Insight:
    projected = metrics.spent + metrics.budget_per_day * PROJECTION_PACE * metrics.days_remaining
    percentage = projected / metrics.total_budget * 100 if metrics.total_budget > 0 else 0.0

    if percentage < PROJECTION_RISK_PCT:
        return Insight(
            icon="🎯",
            title="On track to stay within budget",
            description=f"Projected to use {percentage:.1f}% of budget if you maintain current pace",
        )

    cut = (projected - metrics.total_budget) / metrics.days_remaining
    return Insight(
        icon="⚠️",
        title="Risk of exceeding budget",
        description=(
            f"Projected to use {percentage:.1f}% of budget. Consider reducing daily "
            f"spending by {format_money(cut, metrics.currency)}"
        ),
    )


def generate_insights(
    metrics: BudgetMetrics,
    categories: Sequence[CategorySpend],
    trends: Sequence[TrendPoint],
) -> list[Insight]:
    insights: list[Insight] = []
    if categories:
        insights.append(_top_category(categories[0], metrics))
    if trends:
        insights.append(_daily_average(trends, metrics))
    if metrics.days_remaining > 0:
        insights.append(_projection(metrics))
    return insights
