"""
Financial data models — provider activities, transactions, daily buckets.

Python attributes are snake_case; the JSON shapes exchanged with Wise and
with the dashboard are camelCase, so every model serializes by alias.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimal in Python, plain number on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class RawActivity(CamelModel):
    """An activity record exactly as the provider returned it.

    Only the fields the pipeline reads are declared; anything else Wise sends
    is kept as an extra so the cached copy stays faithful.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    type: str = ""
    title: str | None = None
    description: str | None = None
    primary_amount: str | None = None
    secondary_amount: str | None = None
    status: str | None = None
    created_on: str = ""


class Transaction(CamelModel):
    """A card payment normalized from a :class:`RawActivity`."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: str = Field(description="ISO 8601 timestamp copied verbatim from createdOn")
    description: str
    amount: Money = Field(ge=0)
    currency: str
    type: str
    running_balance: Money | None = None  # reserved, never populated


class DailyBucket(CamelModel):
    """All transactions that fall on one calendar day."""

    model_config = ConfigDict(frozen=True)

    total: Money
    count: int
    currency: str
    transactions: list[Transaction] = Field(default_factory=list)


class Balance(CamelModel):
    """Point-in-time balance of the tracked account."""

    model_config = ConfigDict(frozen=True)

    current: Money
    reserved: Money = Decimal(0)
    available: Money

    @classmethod
    def from_amounts(cls, current: Decimal, reserved: Decimal = Decimal(0)) -> Balance:
        return cls(current=current, reserved=reserved, available=current - reserved)


class DataWindow(CamelModel):
    """Inclusive date range, as ``YYYY-MM-DD`` strings."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class CachedDataset(CamelModel):
    """The complete result of one refresh.

    Built in full before it is published to the cache and never modified
    afterwards; a later refresh replaces it as a whole.
    """

    model_config = ConfigDict(frozen=True)

    activities: list[RawActivity] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    daily_totals: dict[str, DailyBucket] = Field(default_factory=dict)
    balance: Balance | None = None
    currency: str
    data_window: DataWindow
    last_updated: datetime

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def day_count(self) -> int:
        return len(self.daily_totals)
