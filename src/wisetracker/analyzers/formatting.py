"""
Money formatting for human-readable alert and insight text.
"""

from __future__ import annotations

from decimal import Decimal

# Currency symbols and minor-unit digits
CURRENCY_INFO = {
    "USD": {"symbol": "$", "decimals": 2},
    "EUR": {"symbol": "€", "decimals": 2},
    "GBP": {"symbol": "£", "decimals": 2},
    "JPY": {"symbol": "¥", "decimals": 0},
    "AUD": {"symbol": "A$", "decimals": 2},
    "CAD": {"symbol": "CA$", "decimals": 2},
    "CHF": {"symbol": "CHF ", "decimals": 2},
    "SGD": {"symbol": "S$", "decimals": 2},
    "HKD": {"symbol": "HK$", "decimals": 2},
    "KRW": {"symbol": "₩", "decimals": 0},
}


def format_money(amount: float | Decimal, currency: str = "USD") -> str:
    """``format_money(1234, "JPY")`` -> ``"¥1,234"``."""
    info = CURRENCY_INFO.get(currency)
    if info is None:
        return f"{float(amount):,.2f} {currency}"
    return f"{info['symbol']}{float(amount):,.{info['decimals']}f}"
