"""
Data-window settings and their JSON file persistence.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from wisetracker.errors import DateWindowError, SettingsPersistenceError
from wisetracker.models.financial import CamelModel, DataWindow

logger = logging.getLogger("wisetracker.settings")

DEFAULT_START_DATE = "2024-12-01"
DEFAULT_END_DATE = "2024-12-31"


class Settings(CamelModel):
    """The default fetch window (``dataStartDate``..``dataEndDate``)."""

    data_start_date: str
    data_end_date: str

    @property
    def window(self) -> DataWindow:
        return DataWindow(start=self.data_start_date, end=self.data_end_date)


def _parse_date(value: str, name: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise DateWindowError(f"Invalid date format for {name}. Please use YYYY-MM-DD format.") from e


def validate_window(start: str | None, end: str | None, *, require_order: bool = True) -> Settings:
    """Check a requested window and return it as :class:`Settings`.

    Raises:
        DateWindowError: If a date is missing, not ``YYYY-MM-DD``, or
            (with *require_order*) the start is not before the end.
    """
    if not start or not end:
        raise DateWindowError("Both dataStartDate and dataEndDate are required")

    start_date = _parse_date(start, "dataStartDate")
    end_date = _parse_date(end, "dataEndDate")

    if require_order and start_date >= end_date:
        raise DateWindowError("Start date must be before end date")

    return Settings(data_start_date=start_date.isoformat(), data_end_date=end_date.isoformat())


class SettingsStore:
    """Load and save :class:`Settings` as a small JSON file."""

    def __init__(self, path: str | Path, defaults: Settings | None = None) -> None:
        self.path = Path(path)
        self.defaults = defaults or Settings(
            data_start_date=DEFAULT_START_DATE,
            data_end_date=DEFAULT_END_DATE,
        )

    def load(self) -> Settings:
        """Read settings, creating the file with defaults when it is missing."""
        if not self.path.exists():
            logger.info("Settings file %s not found, creating defaults", self.path)
            self.save(self.defaults)
            return self.defaults

        try:
            settings = Settings.model_validate(json.loads(self.path.read_text()))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise SettingsPersistenceError(f"Failed to load settings: {e}") from e

        logger.info(
            "Loaded settings from %s: %s to %s",
            self.path,
            settings.data_start_date,
            settings.data_end_date,
        )
        return settings

    def save(self, settings: Settings) -> None:
        try:
            self.path.write_text(json.dumps(settings.to_json_dict(), indent=2))
        except OSError as e:
            raise SettingsPersistenceError(f"Failed to save settings: {e}") from e
        logger.info("Settings saved to %s", self.path)
