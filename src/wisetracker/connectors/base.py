"""
Base connector — abstract interface for payment data sources.

A connector fetches everything one refresh needs from a provider: the
account balance and every activity inside the data window. It does no
normalization; that is the processing pipeline's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wisetracker.models.financial import Balance, DataWindow, RawActivity


@dataclass(frozen=True)
class ProviderSnapshot:
    """Raw provider data for one data window."""

    balance: Balance
    currency: str
    activities: list[RawActivity] = field(default_factory=list)
    page_count: int = 0


class BaseConnector(ABC):
    """Abstract base class for all data connectors.

    To create a new connector, subclass this and implement:
    - `name`: Unique connector identifier.
    - `fetch()`: Async method that returns a ProviderSnapshot.
    - `validate_credentials()`: Check if credentials are valid.

    Example::

        class MyBankConnector(BaseConnector):
            name = "my_bank"

            async def fetch(self, window: DataWindow) -> ProviderSnapshot:
                ...

            async def validate_credentials(self) -> bool:
                ...
    """

    name: str = "base"
    description: str = "Base connector"

    def __init__(self, credentials: dict[str, Any] | None = None, **options: Any) -> None:
        self.credentials = credentials or {}
        self.options = options

    @abstractmethod
    async def fetch(self, window: DataWindow) -> ProviderSnapshot:
        """Fetch balance and activities for *window*.

        Raises:
            ConfigurationError: If the connector lacks credentials.
            UpstreamError: If the provider cannot be reached or answers badly.
        """
        ...

    @abstractmethod
    async def validate_credentials(self) -> bool:
        """Validate that credentials are correct and the source is accessible."""
        ...

    async def health_check(self) -> dict[str, Any]:
        """Check connector health and connectivity."""
        try:
            valid = await self.validate_credentials()
            return {"connector": self.name, "healthy": valid, "error": None}
        except Exception as e:
            return {"connector": self.name, "healthy": False, "error": str(e)}

    async def close(self) -> None:
        """Release any network resources."""
