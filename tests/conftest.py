"""Shared fixtures and builders for the WiseTracker tests."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from wisetracker.connectors.base import ProviderSnapshot
from wisetracker.models.financial import Balance, DataWindow, RawActivity, Transaction

_ENV_VARS = (
    "WISE_API_TOKEN",
    "WISE_PROFILE_ID",
    "WISE_ENVIRONMENT",
    "WISE_REQUEST_TIMEOUT",
    "MOCK_MODE",
    "PORT",
    "WISETRACKER_SETTINGS_FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell environment out of config loading."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_activity(
    activity_id: str,
    created_on: str,
    amount: str | None = "1,000 JPY",
    title: str | None = "<strong>Lawson</strong>",
    activity_type: str = "CARD_PAYMENT",
) -> RawActivity:
    return RawActivity(
        id=activity_id,
        type=activity_type,
        title=title,
        primary_amount=amount,
        status="COMPLETED",
        created_on=created_on,
    )


def make_transaction(
    txn_id: str,
    date: str,
    amount: str | int = 1000,
    description: str = "Lawson",
    currency: str = "JPY",
) -> Transaction:
    return Transaction(
        id=txn_id,
        date=date,
        description=description,
        amount=Decimal(str(amount)),
        currency=currency,
        type="CARD_PAYMENT",
    )


def make_snapshot(activities: list[RawActivity], current: int = 5000, currency: str = "JPY") -> ProviderSnapshot:
    return ProviderSnapshot(
        balance=Balance.from_amounts(Decimal(current)),
        currency=currency,
        activities=activities,
        page_count=1,
    )


@pytest.fixture
def december_window() -> DataWindow:
    return DataWindow(start="2025-12-01", end="2025-12-05")


@pytest.fixture
def december_activities() -> list[RawActivity]:
    """Three card payments over 12-02 and 12-04."""
    return [
        make_activity("A1", "2025-12-02T10:00:00Z"),
        make_activity("A2", "2025-12-02T18:30:00Z"),
        make_activity("A3", "2025-12-04T12:00:00Z"),
    ]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 12, 3, 12, 0, tzinfo=timezone.utc)
