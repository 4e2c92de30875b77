"""
Cache Store — the single in-memory slot for the latest dataset.

The slot holds one reference to an immutable :class:`CachedDataset`.
Publishing a new dataset is a single assignment, so a reader sees either the
previous dataset or the new one in full.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from wisetracker.errors import NotReadyError

if TYPE_CHECKING:
    from wisetracker.models.financial import CachedDataset


class CacheState(str, Enum):
    """Lifecycle of the cache slot."""

    EMPTY = "empty"  # no refresh has succeeded yet
    READY = "ready"


class CacheStore:
    """Holds the most recent successfully built dataset."""

    def __init__(self) -> None:
        self._dataset: CachedDataset | None = None

    @property
    def state(self) -> CacheState:
        return CacheState.EMPTY if self._dataset is None else CacheState.READY

    def snapshot(self) -> CachedDataset:
        """The current dataset.

        Raises:
            NotReadyError: If no refresh has succeeded yet.
        """
        dataset = self._dataset
        if dataset is None:
            raise NotReadyError("Data not available yet. Server is starting up or data fetch failed.")
        return dataset

    def replace(self, dataset: CachedDataset) -> None:
        """Publish *dataset*, replacing whatever was cached."""
        self._dataset = dataset
