"""
Wise Connector — balance and card activity from the Wise API.

Reads the STANDARD balance of a profile and pages through its activity feed
for a date window.

Authentication: personal API token sent as a bearer token.

Wise API docs:
  https://docs.wise.com/api-docs/api-reference/activity
  https://docs.wise.com/api-docs/api-reference/balance
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from wisetracker.config import WISE_ENVIRONMENTS
from wisetracker.connectors.base import BaseConnector, ProviderSnapshot
from wisetracker.errors import ConfigurationError, UpstreamError
from wisetracker.models.financial import Balance, RawActivity

if TYPE_CHECKING:
    from wisetracker.config import TrackerConfig
    from wisetracker.models.financial import DataWindow

logger = logging.getLogger("wisetracker.connectors.wise")

DEFAULT_MAX_PAGES = 100


class WiseConnector(BaseConnector):
    """Pull balance and activities from Wise.

    Usage::

        connector = WiseConnector(credentials={
            "api_token": "...",
            "profile_id": "12345678",
        }, environment="production")
        snapshot = await connector.fetch(DataWindow(start="2025-12-01", end="2025-12-31"))

    Environments: "sandbox" (default), "production"
    """

    name = "wise"
    description = "Card payments and balance from the Wise API"

    def __init__(
        self,
        credentials: dict[str, Any] | None = None,
        *,
        environment: str = "sandbox",
        request_timeout: float = 30.0,
        max_pages: int = DEFAULT_MAX_PAGES,
        **options: Any,
    ) -> None:
        super().__init__(credentials, **options)
        creds = credentials or {}

        self.api_token: str = creds.get("api_token") or ""
        self.profile_id: str = str(creds.get("profile_id") or "")
        self.environment = environment
        self.request_timeout = request_timeout
        self.max_pages = max_pages

        self._base_url = WISE_ENVIRONMENTS.get(environment, WISE_ENVIRONMENTS["sandbox"])
        self._http: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: TrackerConfig) -> WiseConnector:
        wise = config.wise
        return cls(
            credentials={"api_token": wise.api_token, "profile_id": wise.profile_id},
            environment=wise.environment,
            request_timeout=wise.request_timeout,
            max_pages=wise.max_pages,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_token and self.profile_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create a reusable httpx client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Authorization": f"Bearer {self.api_token}"},
                timeout=self.request_timeout,
            )
        return self._http

    async def close(self) -> None:
        """Clean up HTTP client."""
        if self._http and not self._http.is_closed:
            await self._http.aclose()
        self._http = None

    # ------------------------------------------------------------------
    # API helpers
    # ------------------------------------------------------------------

    async def _api_get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make an authenticated GET request and return the decoded JSON."""
        client = await self._get_client()

        try:
            resp = await client.get(path, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Wise request to {path} failed: {e}") from e

        if resp.status_code >= 400:
            raise UpstreamError(
                f"Wise API error [{resp.status_code}] on {path}: {resp.text[:500]}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(f"Wise returned invalid JSON for {path}") from e

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise ConfigurationError(
                "Server not configured. Please set WISE_API_TOKEN and WISE_PROFILE_ID in .env file"
            )

    # ------------------------------------------------------------------
    # Data fetchers
    # ------------------------------------------------------------------

    async def fetch_balance(self) -> tuple[Balance, str]:
        """Return the primary STANDARD balance and its currency."""
        data = await self._api_get(
            f"/v3/profiles/{self.profile_id}/balances",
            params={"types": "STANDARD"},
        )
        if not isinstance(data, list) or not data:
            raise UpstreamError("No balances found")

        primary = data[0]
        try:
            amount = primary["amount"]
            current = _to_decimal(amount["value"])
            currency = str(amount["currency"])
            reserved = _to_decimal((primary.get("reservedAmount") or {}).get("value", 0))
        except (KeyError, TypeError, AttributeError, InvalidOperation) as e:
            raise UpstreamError(f"Unexpected balance payload: {e}") from e

        logger.info("Current balance: %s %s", current, currency)
        return Balance.from_amounts(current, reserved), currency

    async def fetch_activities(self, window: DataWindow) -> tuple[list[RawActivity], int]:
        """Page through the activity feed for *window*.

        Follows ``cursor`` until it is absent or a page comes back empty, and
        stops after :attr:`max_pages` pages regardless.

        Returns:
            The activities in fetch order and the number of pages read.
        """
        params: dict[str, Any] = {
            "since": f"{window.start}T00:00:00.000Z",
            "until": f"{window.end}T23:59:59.999Z",
        }
        activities: list[RawActivity] = []
        cursor: str | None = None
        page_count = 0

        while True:
            page_count += 1
            page_params = dict(params)
            if cursor:
                page_params["nextCursor"] = cursor

            data = await self._api_get(f"/v1/profiles/{self.profile_id}/activities", params=page_params)
            if not isinstance(data, dict):
                raise UpstreamError("Unexpected activities payload")

            page = data.get("activities") or []
            if not isinstance(page, list):
                raise UpstreamError("Unexpected activities payload")
            for item in page:
                try:
                    activities.append(RawActivity.model_validate(item))
                except ValidationError as e:
                    logger.warning("Skipping malformed Wise activity: %s", e)

            cursor = data.get("cursor")
            if not cursor or not page:
                break

            if page_count >= self.max_pages:
                logger.warning("Reached maximum page limit (%d)", self.max_pages)
                break

        logger.info("Fetched %d activities across %d pages", len(activities), page_count)
        return activities, page_count

    async def fetch(self, window: DataWindow) -> ProviderSnapshot:
        """Fetch balance and activities for *window*."""
        self._require_configured()
        logger.info("Fetching Wise activities from %s to %s", window.start, window.end)

        balance, currency = await self.fetch_balance()
        activities, page_count = await self.fetch_activities(window)

        return ProviderSnapshot(
            balance=balance,
            currency=currency,
            activities=activities,
            page_count=page_count,
        )

    async def list_profiles(self) -> list[dict[str, Any]]:
        """List the profiles the token can access."""
        if not self.api_token:
            raise ConfigurationError("WISE_API_TOKEN not configured")
        data = await self._api_get("/v2/profiles")
        return data if isinstance(data, list) else []

    async def validate_credentials(self) -> bool:
        """Validate the token by listing profiles."""
        if not self.api_token:
            return False
        try:
            await self.list_profiles()
            return True
        except UpstreamError as e:
            logger.warning("Wise credential validation failed: %s", e)
            return False


def _to_decimal(value: Any) -> Decimal:
    return Decimal(str(value))
