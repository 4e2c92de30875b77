"""
Deduplication by record identity.

Cursor pagination can hand back the same activity on two adjacent pages, so
both raw activities and final transactions are passed through here. The first
occurrence of an ``id`` wins and input order is preserved.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable


class _Identified(Protocol):
    @property
    def id(self) -> str: ...


T = TypeVar("T", bound=_Identified)


def dedupe_with_count(items: Iterable[T]) -> tuple[list[T], int]:
    """Drop repeated ids; return the kept items and how many were dropped."""
    seen: set[str] = set()
    kept: list[T] = []
    removed = 0
    for item in items:
        if item.id in seen:
            removed += 1
            continue
        seen.add(item.id)
        kept.append(item)
    return kept, removed


def dedupe_by_id(items: Iterable[T]) -> list[T]:
    """Keep the first occurrence of each id, in input order."""
    kept, _ = dedupe_with_count(items)
    return kept
