"""Analyzers — budget, category, trend, forecast, alert and insight derivations."""

from wisetracker.analyzers.alerts import Alert, AlertLevel, AlertLog, evaluate_alerts
from wisetracker.analyzers.budget import BudgetMetrics, compute_budget_metrics
from wisetracker.analyzers.categories import (
    DEFAULT_CATEGORY_RULES,
    OTHER_CATEGORY,
    CategoryRule,
    CategorySpend,
    category_breakdown,
    classify,
)
from wisetracker.analyzers.dashboard import DashboardAnalytics, build_dashboard
from wisetracker.analyzers.forecast import (
    WEEKDAY_MULTIPLIERS,
    BudgetHealth,
    ForecastDay,
    ForecastKind,
    ForecastSummary,
    average_daily_spend,
    spending_forecast,
    summarize_forecast,
)
from wisetracker.analyzers.insights import Insight, generate_insights
from wisetracker.analyzers.trends import TrendPoint, daily_trends

__all__ = [
    "DEFAULT_CATEGORY_RULES",
    "OTHER_CATEGORY",
    "WEEKDAY_MULTIPLIERS",
    "Alert",
    "AlertLevel",
    "AlertLog",
    "BudgetHealth",
    "BudgetMetrics",
    "CategoryRule",
    "CategorySpend",
    "DashboardAnalytics",
    "ForecastDay",
    "ForecastKind",
    "ForecastSummary",
    "Insight",
    "TrendPoint",
    "average_daily_spend",
    "build_dashboard",
    "category_breakdown",
    "classify",
    "compute_budget_metrics",
    "daily_trends",
    "evaluate_alerts",
    "generate_insights",
    "spending_forecast",
    "summarize_forecast",
]
