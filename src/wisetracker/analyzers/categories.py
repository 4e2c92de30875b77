"""
Spending categories — keyword rules over transaction descriptions.

The rule table is plain data. Rules are tried in order and the first rule
with a keyword contained in the (lower-cased) description wins, so more
specific rules must come first: "uber eats" is food, plain "uber" is
transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from wisetracker.models.financial import Transaction


@dataclass(frozen=True)
class CategoryRule:
    """One category and the keywords that select it."""

    tag: str
    display_name: str
    icon: str
    keywords: tuple[str, ...] = ()

    def matches(self, description: str) -> bool:
        text = description.lower()
        return any(keyword in text for keyword in self.keywords)


DEFAULT_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        tag="food",
        display_name="Food & Dining",
        icon="🍴",
        keywords=(
            "uber eats", "doordash", "grubhub", "restaurant", "mcdonalds", "kfc",
            "pizza", "cafe", "starbucks", "food", "dining",
        ),
    ),
    CategoryRule(
        tag="transport",
        display_name="Transportation",
        icon="🚗",
        keywords=("uber", "lyft", "taxi", "train", "bus", "metro", "transport", "gas", "fuel", "parking"),
    ),
    CategoryRule(
        tag="shopping",
        display_name="Shopping",
        icon="🛍️",
        keywords=("amazon", "walmart", "target", "shop", "store", "market", "mall", "retail"),
    ),
    CategoryRule(
        tag="entertainment",
        display_name="Entertainment",
        icon="🎬",
        keywords=("netflix", "spotify", "movie", "cinema", "game", "entertainment", "youtube", "subscription"),
    ),
    CategoryRule(
        tag="health",
        display_name="Health & Medical",
        icon="🏥",
        keywords=("pharmacy", "hospital", "clinic", "health", "medical", "doctor", "medicine"),
    ),
    CategoryRule(
        tag="utilities",
        display_name="Utilities & Bills",
        icon="📱",
        keywords=("electric", "water", "internet", "phone", "utility", "bill", "service"),
    ),
    CategoryRule(
        tag="convenience",
        display_name="Convenience Store",
        icon="🏠",
        keywords=("7-eleven", "convenience", "corner", "quick", "mini mart", "familymart", "lawson"),
    ),
)

OTHER_CATEGORY = CategoryRule(tag="other", display_name="Other", icon="📋")


def classify(description: str, rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES) -> CategoryRule:
    """Return the first rule matching *description*, or :data:`OTHER_CATEGORY`."""
    for rule in rules:
        if rule.matches(description):
            return rule
    return OTHER_CATEGORY


@dataclass
class CategorySpend:
    """Total spend and transaction count of one category."""

    tag: str
    name: str
    icon: str
    amount: float = 0.0
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.tag,
            "name": self.name,
            "icon": self.icon,
            "amount": self.amount,
            "count": self.count,
        }


def category_breakdown(
    transactions: Iterable[Transaction],
    rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES,
) -> list[CategorySpend]:
    """Per-category spend, largest first.

    Categories with equal spend keep the order in which they first appeared.
    """
    totals: dict[str, CategorySpend] = {}
    for txn in transactions:
        rule = classify(txn.description, rules)
        spend = totals.get(rule.tag)
        if spend is None:
            spend = totals[rule.tag] = CategorySpend(tag=rule.tag, name=rule.display_name, icon=rule.icon)
        spend.amount += abs(float(txn.amount))
        spend.count += 1

    return sorted(totals.values(), key=lambda s: s.amount, reverse=True)
