"""
Error taxonomy for WiseTracker.

Every failure the HTTP layer needs to tell apart has its own class so the
server can map it to a status code without inspecting messages.
"""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all WiseTracker errors."""


class ConfigurationError(TrackerError):
    """Upstream credentials or other required settings are missing."""


class DateWindowError(TrackerError):
    """A requested date window is missing, malformed, or misordered."""


class SettingsPersistenceError(TrackerError):
    """The settings file could not be read or written."""


class UpstreamError(TrackerError):
    """The payments provider request failed or returned unusable data."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotReadyError(TrackerError):
    """No refresh has completed yet, so there is no dataset to serve."""
