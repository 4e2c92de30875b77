"""
WiseTracker — personal expense tracking over the Wise activity feed.

Fetch card payments for a date window, normalize and bucket them by day,
and serve budget analytics from an in-memory cache.
"""

__version__ = "0.1.0"
__all__ = ["ExpenseTracker"]

from wisetracker.tracker import ExpenseTracker  # noqa: E402
