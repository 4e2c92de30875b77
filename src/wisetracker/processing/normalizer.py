"""
Activity Normalizer — turn raw Wise activities into card transactions.

Wise reports the amount of an activity as display text such as
``"1,234 JPY"`` rather than as a number. Parsing that text is split in two:

1. :func:`parse_amount` is pure and reports failure explicitly.
2. :func:`apply_fallback` applies the lenient policy: anything that does not
   parse becomes ``0`` in the fallback currency. This never raises.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from wisetracker.models.financial import Transaction

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wisetracker.models.financial import RawActivity

logger = logging.getLogger("wisetracker.processing.normalizer")

CARD_PAYMENT = "CARD_PAYMENT"
DEFAULT_DESCRIPTION = "Card Payment"
DEFAULT_FALLBACK_CURRENCY = "JPY"

# "<digits with , separators>[.fraction] <currency code>"
# The fraction is part of the amount: "1,234.56 EUR" is 1234.56, never 56.
_AMOUNT_PATTERN = re.compile(r"(\d[\d,]*(?:\.\d+)?)\s+(\w+)")
_MARKUP_PATTERN = re.compile(r"<[^>]*>")


@dataclass(frozen=True)
class ParsedAmount:
    """A successfully parsed amount and currency code."""

    amount: Decimal
    currency: str


@dataclass(frozen=True)
class ParseFailure:
    """The amount text did not contain a recognizable amount."""

    text: str | None
    reason: str


def parse_amount(text: str | None) -> ParsedAmount | ParseFailure:
    """Extract ``(amount, currency)`` from provider amount text.

    Examples::

        parse_amount("1,234 JPY")      # ParsedAmount(Decimal("1234"), "JPY")
        parse_amount("<b>980 JPY</b>") # ParsedAmount(Decimal("980"), "JPY")
        parse_amount("n/a")            # ParseFailure(...)
    """
    if not text:
        return ParseFailure(text, "empty amount")

    match = _AMOUNT_PATTERN.search(text)
    if match is None:
        return ParseFailure(text, "no '<amount> <currency>' pair found")

    digits = match.group(1).replace(",", "")
    try:
        amount = Decimal(digits)
    except InvalidOperation:
        return ParseFailure(text, f"not a number: {digits!r}")

    return ParsedAmount(amount=amount, currency=match.group(2))


def apply_fallback(
    result: ParsedAmount | ParseFailure,
    fallback_currency: str = DEFAULT_FALLBACK_CURRENCY,
) -> tuple[Decimal, str]:
    """Resolve a parse result to a usable ``(amount, currency)`` pair."""
    if isinstance(result, ParseFailure):
        return Decimal(0), fallback_currency
    return result.amount, result.currency


def strip_markup(text: str | None) -> str:
    """Remove every ``<...>`` tag from *text*."""
    return _MARKUP_PATTERN.sub("", text or "")


def is_card_payment(activity: RawActivity) -> bool:
    """Whether an activity should become a transaction."""
    return activity.type == CARD_PAYMENT and bool(activity.primary_amount)


def normalize_activity(
    activity: RawActivity,
    fallback_currency: str = DEFAULT_FALLBACK_CURRENCY,
) -> Transaction:
    """Convert one card-payment activity into a :class:`Transaction`."""
    result = parse_amount(activity.primary_amount)
    if isinstance(result, ParseFailure):
        logger.warning(
            "Activity %s: %s (%r), using 0 %s",
            activity.id,
            result.reason,
            result.text,
            fallback_currency,
        )
    amount, currency = apply_fallback(result, fallback_currency)

    return Transaction(
        id=activity.id,
        date=activity.created_on,
        description=strip_markup(activity.title) or DEFAULT_DESCRIPTION,
        amount=amount,
        currency=currency,
        type=activity.type,
        running_balance=None,
    )


def normalize_activities(
    activities: Iterable[RawActivity],
    fallback_currency: str = DEFAULT_FALLBACK_CURRENCY,
) -> list[Transaction]:
    """Normalize every eligible activity, preserving input order."""
    return [
        normalize_activity(activity, fallback_currency)
        for activity in activities
        if is_card_payment(activity)
    ]
