"""
Request and response bodies of the HTTP API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from wisetracker.models.financial import Balance, CamelModel, DailyBucket, DataWindow, Transaction


class ResyncRequest(CamelModel):
    start_date: str | None = None
    end_date: str | None = None


class SettingsRequest(CamelModel):
    data_start_date: str | None = None
    data_end_date: str | None = None


class TransactionsResponse(CamelModel):
    transactions: list[Transaction]
    daily_totals: dict[str, DailyBucket]
    period: DataWindow
    currency: str
    balance: Balance | None = None
    last_updated: datetime
    data_window: DataWindow
    cached: bool = True


class ResyncResponse(CamelModel):
    success: bool = True
    message: str = "Data successfully refreshed"
    last_updated: datetime
    transaction_count: int
    day_count: int
    data_window: DataWindow


class SettingsUpdateResponse(CamelModel):
    success: bool = True
    message: str = "Settings updated and data refreshed successfully"
    settings: dict[str, str]
    transaction_count: int
    day_count: int


class HealthResponse(CamelModel):
    status: str = "ok"
    configured: bool
    environment: str
    mode: str


class ProfilesResponse(CamelModel):
    current_profile_id: str | None = None
    available_profiles: list[dict[str, Any]]
    recommendation: str
