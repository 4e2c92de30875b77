"""
Mock Connector — realistic generated card activity for demos and UI work.

Produces the same ProviderSnapshot shape as the Wise connector, so the
generated activities go through the normal processing pipeline. Pass a seeded
``random.Random`` to get reproducible data.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from wisetracker.connectors.base import BaseConnector, ProviderSnapshot
from wisetracker.models.financial import Balance, RawActivity

if TYPE_CHECKING:
    from wisetracker.models.financial import DataWindow

logger = logging.getLogger("wisetracker.connectors.mock")

MOCK_CURRENCY = "JPY"
MOCK_BALANCE = Decimal(120342)
MAX_TRANSACTIONS_PER_DAY = 5


@dataclass(frozen=True)
class Merchant:
    name: str
    min_amount: int
    max_amount: int
    frequency: float


MOCK_MERCHANTS: tuple[Merchant, ...] = (
    Merchant("Uber Eats", 1200, 4000, 0.3),
    Merchant("7-Eleven", 300, 1500, 0.2),
    Merchant("FamilyMart", 400, 1200, 0.15),
    Merchant("McDonald's", 800, 2000, 0.15),
    Merchant("Starbucks", 600, 1200, 0.1),
    Merchant("Yoshinoya", 500, 1000, 0.1),
    Merchant("Lawson", 200, 800, 0.15),
    Merchant("Sukiya", 400, 900, 0.08),
    Merchant("CoCo Ichibanya", 800, 1500, 0.05),
    Merchant("Saizeriya", 700, 1800, 0.05),
    Merchant("KFC Japan", 900, 2200, 0.04),
    Merchant("Mos Burger", 800, 1600, 0.04),
    Merchant("Doutor Coffee", 400, 800, 0.03),
    Merchant("Matsuya", 500, 1200, 0.03),
    Merchant("Uniqlo", 2000, 8000, 0.02),
)


def transactions_for_day(day: date, rng: random.Random) -> int:
    """How many payments happen on *day*: usually one, more on weekends."""
    count = 1 if rng.random() < 0.7 else 0
    if day.weekday() >= 5 and rng.random() < 0.5:
        count += 1
    if rng.random() < 0.3:
        count += rng.randint(1, 2)
    return min(count, MAX_TRANSACTIONS_PER_DAY)


def realistic_time(rng: random.Random) -> time:
    """Mostly lunch-to-evening hours, occasionally early morning or late."""
    hour = 11 + rng.randrange(8) if rng.random() < 0.6 else 8 + rng.randrange(14)
    return time(hour, rng.randrange(60), rng.randrange(60))


def _format_timestamp(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def generate_activities(start: date, end: date, rng: random.Random | None = None) -> list[RawActivity]:
    """Generate card-payment activities for every day in ``[start, end]``.

    Returned newest first, like the Wise activity feed.
    """
    rng = rng or random.Random()
    weights = [m.frequency for m in MOCK_MERCHANTS]
    activities: list[RawActivity] = []

    day = start
    while day <= end:
        for _ in range(transactions_for_day(day, rng)):
            merchant = rng.choices(MOCK_MERCHANTS, weights=weights)[0]
            amount = rng.randint(merchant.min_amount, merchant.max_amount)
            moment = datetime.combine(day, realistic_time(rng), tzinfo=timezone.utc)
            activities.append(RawActivity(
                id=f"MOCK-CARD-{rng.getrandbits(64):016x}",
                type="CARD_PAYMENT",
                title=f"<strong>{merchant.name}</strong>",
                description="",
                primary_amount=f"{amount:,} {MOCK_CURRENCY}",
                secondary_amount="",
                status="COMPLETED",
                created_on=_format_timestamp(moment),
            ))
        day += timedelta(days=1)

    activities.sort(key=lambda a: a.created_on, reverse=True)
    logger.info("Generated %d mock activities", len(activities))
    return activities


class MockConnector(BaseConnector):
    """Serve generated data instead of calling a provider.

    Usage::

        connector = MockConnector(rng=random.Random(42))
        snapshot = await connector.fetch(window)
    """

    name = "mock"
    description = "Generated card payments for demos (no API calls)"

    def __init__(
        self,
        credentials: dict[str, Any] | None = None,
        *,
        rng: random.Random | None = None,
        balance: Decimal = MOCK_BALANCE,
        **options: Any,
    ) -> None:
        super().__init__(credentials, **options)
        self.rng = rng or random.Random()
        self.balance = balance

    async def fetch(self, window: DataWindow) -> ProviderSnapshot:
        logger.info("MOCK MODE: generating activities from %s to %s", window.start, window.end)
        activities = generate_activities(
            date.fromisoformat(window.start),
            date.fromisoformat(window.end),
            self.rng,
        )
        return ProviderSnapshot(
            balance=Balance.from_amounts(self.balance),
            currency=MOCK_CURRENCY,
            activities=activities,
            page_count=1,
        )

    async def validate_credentials(self) -> bool:
        return True
