"""
WiseTracker — Main orchestrator.

The ExpenseTracker ties the connector, the processing pipeline, the cache
slot and the persisted settings together. The HTTP API and the CLI are thin
layers over it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from wisetracker.analyzers.dashboard import DashboardAnalytics, build_dashboard
from wisetracker.cache import CacheStore
from wisetracker.config import TrackerConfig
from wisetracker.connectors.registry import create_connector
from wisetracker.errors import ConfigurationError
from wisetracker.processing.builder import build_dataset
from wisetracker.processing.window import WindowSlice, filter_window
from wisetracker.settings import Settings, SettingsStore, validate_window

if TYPE_CHECKING:
    from wisetracker.connectors.base import BaseConnector
    from wisetracker.models.financial import CachedDataset

logger = logging.getLogger("wisetracker")


@dataclass
class ExpenseTracker:
    """Top-level orchestrator for WiseTracker.

    Usage::

        from wisetracker import ExpenseTracker

        tracker = ExpenseTracker.from_config("wisetracker.yaml")
        dataset = await tracker.refresh()
        view = tracker.transactions("2024-12-01", "2024-12-07")

    Refreshes are serialized; reads never wait for a refresh and always see
    one complete dataset.
    """

    config: TrackerConfig
    connector: BaseConnector
    settings_store: SettingsStore
    cache: CacheStore = field(default_factory=CacheStore)
    _refresh_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)
    _settings: Settings | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> ExpenseTracker:
        """Create a tracker from a config file or keyword arguments."""
        return cls.from_tracker_config(TrackerConfig.load(config_path, **overrides))

    @classmethod
    def from_tracker_config(cls, config: TrackerConfig) -> ExpenseTracker:
        tracker = cls(
            config=config,
            connector=create_connector(config),
            settings_store=SettingsStore(config.settings_file),
        )
        logger.info(
            "WiseTracker initialized (%s mode, %s connector)",
            tracker.mode,
            tracker.connector.name,
        )
        return tracker

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @property
    def mode(self) -> str:
        return "mock" if self.config.mock_mode else "live"

    @property
    def settings(self) -> Settings:
        """The persisted data window, loaded on first use."""
        if self._settings is None:
            self._settings = self.settings_store.load()
        return self._settings

    async def update_settings(self, start: str | None, end: str | None) -> CachedDataset:
        """Validate, persist and apply a new data window.

        Nothing is written when validation fails. The new window is saved
        before the refresh, so it stays in effect even if the refresh fails.

        Raises:
            DateWindowError: If the window is invalid.
            SettingsPersistenceError: If the settings file cannot be written.
        """
        settings = validate_window(start, end)
        self.settings_store.save(settings)
        self._settings = settings
        logger.info("Settings updated, refreshing data...")
        return await self.refresh()

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refresh(self, start: str | None = None, end: str | None = None) -> CachedDataset:
        """Fetch, process and publish a new dataset.

        *start* and *end* override the configured window for this refresh
        only. On any failure the previously cached dataset stays in place.

        Raises:
            DateWindowError: If an explicit bound is not ``YYYY-MM-DD``.
            ConfigurationError: If live mode lacks credentials.
            UpstreamError: If the provider request fails.
        """
        configured = self.settings
        window = validate_window(
            start or configured.data_start_date,
            end or configured.data_end_date,
            require_order=False,
        ).window

        async with self._refresh_lock:
            try:
                snapshot = await self.connector.fetch(window)
                dataset = build_dataset(
                    snapshot,
                    window,
                    fallback_currency=self.config.fallback_currency,
                    now=datetime.now(timezone.utc),
                )
            except Exception as e:
                logger.error("Refresh for %s to %s failed: %s", window.start, window.end, e)
                raise
            self.cache.replace(dataset)

        logger.info(
            "Data refresh complete: %d transactions across %d days",
            dataset.transaction_count,
            dataset.day_count,
        )
        return dataset

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def transactions(self, start: str | None = None, end: str | None = None) -> tuple[CachedDataset, WindowSlice]:
        """The cached dataset and its slice for the requested interval.

        Raises:
            NotReadyError: If no refresh has succeeded yet.
            DateWindowError: If a bound cannot be parsed.
        """
        dataset = self.cache.snapshot()
        if not start and not end:
            return dataset, WindowSlice(transactions=dataset.transactions, daily_totals=dataset.daily_totals)
        return dataset, filter_window(dataset, start, end)

    def analytics(
        self,
        start: str | None = None,
        end: str | None = None,
        now: datetime | None = None,
    ) -> DashboardAnalytics:
        """Dashboard analytics over the cached data, optionally filtered."""
        dataset, view = self.transactions(start, end)
        return build_dashboard(
            view.transactions,
            view.daily_totals,
            dataset.balance,
            dataset.data_window,
            dataset.currency,
            now=now,
        )

    async def list_profiles(self) -> list[dict[str, Any]]:
        """Profiles visible to the configured Wise token."""
        list_profiles = getattr(self.connector, "list_profiles", None)
        if list_profiles is None:
            raise ConfigurationError(f"Connector '{self.connector.name}' cannot list profiles")
        return await list_profiles()

    async def close(self) -> None:
        await self.connector.close()
