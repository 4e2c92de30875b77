"""
Budget Alerts — threshold checks over the current budget position.

Alerts are recomputed on every read and carry a stable ``id`` per rule, so a
client can show each alert once per session with :class:`AlertLog`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from wisetracker.analyzers.formatting import format_money

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from wisetracker.analyzers.budget import BudgetMetrics
    from wisetracker.analyzers.categories import CategorySpend
    from wisetracker.models.financial import DailyBucket

BUDGET_DANGER_PCT = 90.0
BUDGET_WARNING_PCT = 75.0
DAILY_OVERSPEND_FACTOR = 1.5
CATEGORY_DOMINANT_SHARE = 0.4
ON_TRACK_PCT = 50.0


class AlertLevel(str, Enum):
    """Alert severity, matching the dashboard styles."""

    DANGER = "danger"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


@dataclass(frozen=True)
class Alert:
    id: str
    level: AlertLevel
    icon: str
    title: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.level.value,
            "icon": self.icon,
            "title": self.title,
            "message": self.message,
        }


def _budget_alert(metrics: BudgetMetrics) -> Alert | None:
    pct = metrics.spent_percentage
    if pct >= BUDGET_DANGER_PCT:
        return Alert(
            id="budget-90",
            level=AlertLevel.DANGER,
            icon="🚨",
            title="Budget Alert: Over 90% Used",
            message=(
                f"You've spent {pct:.1f}% of your budget. Consider reducing spending "
                f"for the remaining {metrics.days_remaining} days."
            ),
        )
    if pct >= BUDGET_WARNING_PCT:
        return Alert(
            id="budget-75",
            level=AlertLevel.WARNING,
            icon="⚠️",
            title="Budget Alert: 75% Used",
            message=(
                f"You've used {pct:.1f}% of your budget. You have "
                f"{format_money(metrics.current_balance, metrics.currency)} left for "
                f"{metrics.days_remaining} days."
            ),
        )
    return None


def _daily_overspend_alert(metrics: BudgetMetrics, today_spending: float) -> Alert | None:
    target = metrics.budget_per_day
    if today_spending <= target * DAILY_OVERSPEND_FACTOR:
        return None
    if target > 0:
        detail = f"is {(today_spending / target - 1) * 100:.0f}% above your daily target."
    else:
        detail = "exceeds your daily target."
    return Alert(
        id="daily-overspend",
        level=AlertLevel.WARNING,
        icon="💸",
        title="High Daily Spending",
        message=f"Today's spending ({format_money(today_spending, metrics.currency)}) {detail}",
    )


def _category_alert(metrics: BudgetMetrics, categories: Sequence[CategorySpend]) -> Alert | None:
    if not categories:
        return None
    top = categories[0]
    if top.amount <= metrics.spent * CATEGORY_DOMINANT_SHARE:
        return None
    return Alert(
        id="category-dominant",
        level=AlertLevel.INFO,
        icon=top.icon,
        title=f"{top.name} Dominates Spending",
        message=(
            f"{top.name} accounts for {top.amount / metrics.spent * 100:.1f}% of your total "
            "spending. Consider reviewing this category."
        ),
    )


def _on_track_alert(metrics: BudgetMetrics) -> Alert | None:
    if metrics.spent_percentage >= ON_TRACK_PCT or metrics.days_remaining >= metrics.total_days / 2:
        return None
    return Alert(
        id="on-track",
        level=AlertLevel.SUCCESS,
        icon="🎉",
        title="Great Job! Staying On Track",
        message=(
            f"You're only at {metrics.spent_percentage:.1f}% of your budget halfway through "
            "the period. Keep up the excellent spending discipline!"
        ),
    )


def evaluate_alerts(
    metrics: BudgetMetrics,
    daily_totals: Mapping[str, DailyBucket],
    categories: Sequence[CategorySpend],
    today: date | None = None,
) -> list[Alert]:
    """All alerts that currently apply. Empty when there is no spending data."""
    if not metrics.has_transactions:
        return []

    today = today or datetime.now(timezone.utc).date()
    bucket = daily_totals.get(today.isoformat())
    today_spending = float(bucket.total) if bucket is not None else 0.0

    candidates = (
        _budget_alert(metrics),
        _daily_overspend_alert(metrics, today_spending),
        _category_alert(metrics, categories),
        _on_track_alert(metrics),
    )
    return [alert for alert in candidates if alert is not None]


class AlertLog:
    """Remembers which alerts were already shown in this session."""

    def __init__(self) -> None:
        self._shown: set[str] = set()

    def __contains__(self, alert_id: object) -> bool:
        return alert_id in self._shown

    def filter_new(self, alerts: Iterable[Alert]) -> list[Alert]:
        """Return the alerts not shown yet and mark them as shown."""
        fresh = [alert for alert in alerts if alert.id not in self._shown]
        self._shown.update(alert.id for alert in fresh)
        return fresh

    def dismiss(self, alert_id: str) -> None:
        """Forget *alert_id* so it can be shown again."""
        self._shown.discard(alert_id)
