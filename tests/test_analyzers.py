"""Tests for the budget, category, trend, forecast, alert and insight analyzers."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from conftest import make_transaction
from wisetracker.analyzers import (
    DEFAULT_CATEGORY_RULES,
    OTHER_CATEGORY,
    WEEKDAY_MULTIPLIERS,
    AlertLevel,
    AlertLog,
    BudgetHealth,
    BudgetMetrics,
    ForecastKind,
    average_daily_spend,
    build_dashboard,
    category_breakdown,
    classify,
    compute_budget_metrics,
    daily_trends,
    evaluate_alerts,
    generate_insights,
    spending_forecast,
    summarize_forecast,
)
from wisetracker.analyzers.formatting import format_money
from wisetracker.models.financial import Balance, DataWindow
from wisetracker.processing import aggregate_daily


def _metrics(**overrides) -> BudgetMetrics:  # noqa: ANN003
    values = {
        "total_budget": 10000.0,
        "spent": 3000.0,
        "current_balance": 7000.0,
        "spent_percentage": 30.0,
        "days_remaining": 10,
        "total_days": 30,
        "budget_per_day": 700.0,
        "currency": "JPY",
        "has_transactions": True,
    }
    values.update(overrides)
    return BudgetMetrics(**values)


# ----------------------------------------------------------------------
# Categories
# ----------------------------------------------------------------------


class TestCategories:
    @pytest.mark.parametrize(
        "description,tag",
        [
            ("Uber Eats Tokyo", "food"),
            ("UBER TRIP", "transport"),
            ("Amazon.co.jp", "shopping"),
            ("Netflix", "entertainment"),
            ("Sugi Pharmacy", "health"),
            ("Tokyo Electric", "utilities"),
            ("Lawson", "convenience"),
            ("FamilyMart", "convenience"),
            ("Yoshinoya", "other"),
        ],
    )
    def test_classify(self, description: str, tag: str) -> None:
        assert classify(description).tag == tag

    def test_first_rule_wins(self) -> None:
        # "food" outranks "market" (shopping)
        assert classify("Food Market").tag == "food"

    def test_no_match_is_other(self) -> None:
        rule = classify("")
        assert rule is OTHER_CATEGORY
        assert rule.display_name == "Other"

    def test_rule_order(self) -> None:
        assert [r.tag for r in DEFAULT_CATEGORY_RULES] == [
            "food", "transport", "shopping", "entertainment", "health", "utilities", "convenience",
        ]

    def test_breakdown_sorted_by_amount(self) -> None:
        txns = [
            make_transaction("A", "2025-12-01T10:00:00Z", 500, description="Lawson"),
            make_transaction("B", "2025-12-01T11:00:00Z", 1200, description="Uber Eats"),
            make_transaction("C", "2025-12-02T11:00:00Z", 900, description="Starbucks"),
            make_transaction("D", "2025-12-02T12:00:00Z", 300, description="Yoshinoya"),
        ]
        breakdown = category_breakdown(txns)
        assert [c.tag for c in breakdown] == ["food", "convenience", "other"]
        assert breakdown[0].amount == 2100.0
        assert breakdown[0].count == 2
        assert breakdown[0].to_dict()["name"] == "Food & Dining"

    def test_breakdown_empty(self) -> None:
        assert category_breakdown([]) == []


# ----------------------------------------------------------------------
# Budget metrics
# ----------------------------------------------------------------------


class TestBudgetMetrics:
    def test_total_budget_and_percentage(self) -> None:
        buckets = aggregate_daily([
            make_transaction("A", "2025-12-02T10:00:00Z", 2000),
            make_transaction("B", "2025-12-04T10:00:00Z", 1000),
        ])
        metrics = compute_budget_metrics(
            buckets,
            Balance.from_amounts(Decimal(5000)),
            DataWindow(start="2025-12-01", end="2025-12-31"),
            "JPY",
            now=datetime(2025, 12, 11, 12, tzinfo=timezone.utc),
        )
        assert metrics.total_budget == 8000.0
        assert metrics.spent == 3000.0
        assert metrics.spent_percentage == 37.5
        assert metrics.total_days == 30
        assert metrics.days_remaining == 20
        assert metrics.budget_per_day == 250.0
        assert metrics.has_transactions is True

    def test_window_over_means_no_days_left(self) -> None:
        metrics = compute_budget_metrics(
            {},
            Balance.from_amounts(Decimal(5000)),
            DataWindow(start="2025-12-01", end="2025-12-31"),
            "JPY",
            now=datetime(2026, 1, 15, tzinfo=timezone.utc),
        )
        assert metrics.days_remaining == 0
        assert metrics.budget_per_day == 0.0
        assert metrics.has_transactions is False

    def test_zero_budget(self) -> None:
        metrics = compute_budget_metrics(
            {},
            Balance.from_amounts(Decimal(0)),
            DataWindow(start="2025-12-01", end="2025-12-31"),
            "JPY",
            now=datetime(2025, 12, 10, tzinfo=timezone.utc),
        )
        assert metrics.total_budget == 0.0
        assert metrics.spent_percentage == 0.0

    def test_to_dict_keys(self) -> None:
        assert set(_metrics().to_dict()) == {
            "totalBudget", "spent", "currentBalance", "spentPercentage", "daysRemaining",
            "totalDays", "budgetPerDay", "currency", "hasTransactions",
        }


# ----------------------------------------------------------------------
# Trends & forecast
# ----------------------------------------------------------------------


class TestTrendsAndForecast:
    def test_trends_last_14_ascending(self) -> None:
        txns = [make_transaction(str(d), f"2025-12-{d:02d}T10:00:00Z", d * 100) for d in range(1, 21)]
        trends = daily_trends(aggregate_daily(reversed(txns)))
        assert len(trends) == 14
        assert trends[0].date == "2025-12-07"
        assert trends[-1].date == "2025-12-20"
        assert trends[-1].amount == 2000.0

    def test_average_from_last_seven_trend_points(self) -> None:
        txns = [make_transaction(str(d), f"2025-12-{d:02d}T10:00:00Z", 1000 if d > 3 else 99999) for d in range(1, 11)]
        trends = daily_trends(aggregate_daily(txns))
        assert average_daily_spend(trends, _metrics()) == 1000.0

    def test_average_fallbacks(self) -> None:
        assert average_daily_spend([], _metrics(spent=4000.0, total_days=30, days_remaining=10)) == 200.0
        assert average_daily_spend([], _metrics(spent=0.0, budget_per_day=500.0)) == 400.0

    def test_forecast_shape(self) -> None:
        today = date(2025, 12, 10)  # a Wednesday
        buckets = aggregate_daily([
            make_transaction("A", "2025-12-10T09:00:00Z", 700),
            make_transaction("B", "2025-12-08T09:00:00Z", 300),
        ])
        forecast = spending_forecast(buckets, _metrics(), today=today)

        assert len(forecast) == 14
        assert [d.kind for d in forecast[:7]] == [ForecastKind.HISTORICAL] * 6 + [ForecastKind.TODAY]
        assert forecast[0].date == "2025-12-04"
        assert forecast[6].date == "2025-12-10"
        assert forecast[6].amount == 700.0
        assert forecast[4].amount == 300.0
        assert forecast[5].amount == 0.0
        assert all(d.kind is ForecastKind.PREDICTED for d in forecast[7:])

        average = (700.0 + 300.0) / 2
        thursday, friday, sunday = forecast[7], forecast[8], forecast[10]
        assert thursday.amount == pytest.approx(average * 1.1)
        assert friday.amount == pytest.approx(average * 1.3)
        assert sunday.amount == pytest.approx(average * 0.8)

    def test_weekday_multipliers(self) -> None:
        assert WEEKDAY_MULTIPLIERS[6] == 0.8  # Sunday
        assert WEEKDAY_MULTIPLIERS[4] == 1.3  # Friday

    def test_summary_health(self) -> None:
        forecast = spending_forecast({}, _metrics(budget_per_day=100.0, spent=0.0), today=date(2025, 12, 10))
        summary = summarize_forecast(forecast, _metrics(spent=3000.0, total_budget=10000.0))
        assert summary.predicted_total == pytest.approx(sum(d.amount for d in forecast[7:]))
        assert summary.projected_total == pytest.approx(3000.0 + summary.predicted_total)
        assert summary.health is BudgetHealth.GOOD

        over = summarize_forecast(forecast, _metrics(spent=9900.0, total_budget=10000.0))
        assert over.health is BudgetHealth.OVER_BUDGET
        assert over.to_dict()["health"] == "Over Budget"

        no_budget = summarize_forecast(forecast, _metrics(total_budget=0.0))
        assert no_budget.projected_percentage == 0.0


# ----------------------------------------------------------------------
# Alerts
# ----------------------------------------------------------------------


class TestAlerts:
    TODAY = date(2025, 12, 10)

    def _ids(self, metrics: BudgetMetrics, buckets=None, categories=None) -> list[str]:  # noqa: ANN001
        alerts = evaluate_alerts(metrics, buckets or {}, categories or [], today=self.TODAY)
        return [a.id for a in alerts]

    def test_no_alerts_without_transactions(self) -> None:
        assert self._ids(_metrics(spent_percentage=95.0, has_transactions=False)) == []

    def test_budget_thresholds(self) -> None:
        assert "budget-90" in self._ids(_metrics(spent_percentage=90.0))
        ids = self._ids(_metrics(spent_percentage=80.0))
        assert "budget-75" in ids
        assert "budget-90" not in ids
        assert not {"budget-75", "budget-90"} & set(self._ids(_metrics(spent_percentage=74.9)))

    def test_daily_overspend(self) -> None:
        buckets = aggregate_daily([make_transaction("A", "2025-12-10T09:00:00Z", 1051)])
        alerts = evaluate_alerts(_metrics(budget_per_day=700.0), buckets, [], today=self.TODAY)
        overspend = next(a for a in alerts if a.id == "daily-overspend")
        assert overspend.level is AlertLevel.WARNING
        assert "50% above" in overspend.message

        buckets = aggregate_daily([make_transaction("A", "2025-12-10T09:00:00Z", 1050)])
        assert "daily-overspend" not in self._ids(_metrics(budget_per_day=700.0), buckets)

    def test_daily_overspend_with_zero_target(self) -> None:
        buckets = aggregate_daily([make_transaction("A", "2025-12-10T09:00:00Z", 10)])
        alerts = evaluate_alerts(_metrics(budget_per_day=0.0), buckets, [], today=self.TODAY)
        assert any(a.id == "daily-overspend" for a in alerts)

    def test_category_dominant(self) -> None:
        categories = category_breakdown([
            make_transaction("A", "2025-12-01T10:00:00Z", 2000, description="Uber Eats"),
            make_transaction("B", "2025-12-01T11:00:00Z", 1000, description="Lawson"),
        ])
        alerts = evaluate_alerts(_metrics(spent=3000.0), {}, categories, today=self.TODAY)
        dominant = next(a for a in alerts if a.id == "category-dominant")
        assert dominant.level is AlertLevel.INFO
        assert dominant.icon == "🍴"
        assert "66.7%" in dominant.message

    def test_on_track(self) -> None:
        assert "on-track" in self._ids(_metrics(spent_percentage=30.0, days_remaining=10, total_days=30))
        assert "on-track" not in self._ids(_metrics(spent_percentage=30.0, days_remaining=20, total_days=30))
        assert "on-track" not in self._ids(_metrics(spent_percentage=50.0, days_remaining=10, total_days=30))

    def test_alert_log_shows_each_alert_once(self) -> None:
        alerts = evaluate_alerts(_metrics(spent_percentage=95.0), {}, [], today=self.TODAY)
        log = AlertLog()
        assert [a.id for a in log.filter_new(alerts)] == ["budget-90"]
        assert log.filter_new(alerts) == []
        assert "budget-90" in log

        log.dismiss("budget-90")
        assert [a.id for a in log.filter_new(alerts)] == ["budget-90"]


# ----------------------------------------------------------------------
# Insights & dashboard
# ----------------------------------------------------------------------


class TestInsights:
    def test_all_three(self) -> None:
        categories = category_breakdown([make_transaction("A", "2025-12-01T10:00:00Z", 3000, description="Uber Eats")])
        trends = daily_trends(aggregate_daily([make_transaction("A", "2025-12-01T10:00:00Z", 3000)]))
        insights = generate_insights(_metrics(), categories, trends)

        assert [i.title for i in insights] == [
            "Food & Dining is your biggest expense",
            "Daily spending is over target",
            "On track to stay within budget",
        ]
        assert "100.0% of spending" in insights[0].description

    def test_risk_of_exceeding(self) -> None:
        metrics = _metrics(spent=9000.0, total_budget=10000.0, budget_per_day=500.0, days_remaining=5)
        (projection,) = generate_insights(metrics, [], [])
        assert projection.title == "Risk of exceeding budget"
        assert "110.0%" in projection.description
        assert format_money(200, "JPY") in projection.description

    def test_no_projection_after_window(self) -> None:
        assert generate_insights(_metrics(days_remaining=0), [], []) == []


class TestDashboard:
    def test_build_dashboard(self) -> None:
        txns = [
            make_transaction("A", "2025-12-02T10:00:00Z", 2000, description="Uber Eats"),
            make_transaction("B", "2025-12-04T10:00:00Z", 1000, description="Lawson"),
        ]
        analytics = build_dashboard(
            txns,
            aggregate_daily(txns),
            Balance.from_amounts(Decimal(5000)),
            DataWindow(start="2025-12-01", end="2025-12-31"),
            "JPY",
            now=datetime(2025, 12, 11, 12, tzinfo=timezone.utc),
        )
        data = analytics.to_dict()

        assert set(data) == {"budget", "categories", "trends", "forecast", "forecastSummary", "alerts", "insights"}
        assert data["budget"]["totalBudget"] == 8000.0
        assert data["budget"]["spentPercentage"] == 37.5
        assert data["categories"][0]["key"] == "food"
        assert len(data["forecast"]) == 14
        assert data["forecast"][6] == {"date": "2025-12-11", "amount": 0.0, "type": "today"}
        assert "category-dominant" in [a["id"] for a in data["alerts"]]


class TestFormatting:
    def test_known_currencies(self) -> None:
        assert format_money(1234.4, "JPY") == "¥1,234"
        assert format_money(Decimal("1234.5"), "USD") == "$1,234.50"

    def test_unknown_currency(self) -> None:
        assert format_money(12, "XYZ") == "12.00 XYZ"
