"""
HTTP API — FastAPI application over one :class:`ExpenseTracker`.

Reads are served from the in-memory cache. The only routes that reach the
provider are ``POST /api/resync``, ``POST /api/settings`` and the debug
profile listing.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wisetracker import __version__
from wisetracker.api.schemas import (
    HealthResponse,
    ProfilesResponse,
    ResyncRequest,
    ResyncResponse,
    SettingsRequest,
    SettingsUpdateResponse,
    TransactionsResponse,
)
from wisetracker.config import TrackerConfig
from wisetracker.errors import DateWindowError, NotReadyError, SettingsPersistenceError, TrackerError
from wisetracker.models.financial import DataWindow
from wisetracker.tracker import ExpenseTracker

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger("wisetracker.api")


def get_tracker(request: Request) -> ExpenseTracker:
    return request.app.state.tracker


def _failure(status_code: int, error: str, details: Any = None) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Invalid request: " + "; ".join(parts)


async def _startup_refresh(tracker: ExpenseTracker) -> None:
    if not tracker.config.mock_mode and not tracker.config.is_configured:
        logger.warning("Wise API not configured. Set WISE_API_TOKEN and WISE_PROFILE_ID or enable MOCK_MODE")
        return
    try:
        await tracker.refresh()
    except TrackerError as e:
        # The server still starts; reads answer 503 until a resync succeeds.
        logger.error("Initial data fetch failed: %s", e)


def create_app(
    tracker: ExpenseTracker | None = None,
    config: TrackerConfig | None = None,
    *,
    refresh_on_startup: bool = True,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        tracker: Tracker to serve. Built from *config* when omitted.
        config: Configuration used when no tracker is given.
        refresh_on_startup: Fetch the configured window when the app starts.
    """
    if tracker is None:
        tracker = ExpenseTracker.from_tracker_config(config or TrackerConfig.load())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if refresh_on_startup:
            await _startup_refresh(app.state.tracker)
        yield
        await app.state.tracker.close()

    app = FastAPI(title="WiseTracker", version=__version__, lifespan=lifespan)
    app.state.tracker = tracker
    app.add_middleware(
        CORSMiddleware,
        allow_origins=tracker.config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotReadyError)
    async def not_ready_handler(request: Request, exc: NotReadyError) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content={"error": str(exc), "suggestion": "Try again in a few seconds or check server logs."},
        )

    @app.exception_handler(DateWindowError)
    async def date_window_handler(request: Request, exc: DateWindowError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})

    @app.get("/api/transactions")
    async def get_transactions(
        intervalStart: str | None = None,
        intervalEnd: str | None = None,
        tracker: ExpenseTracker = Depends(get_tracker),
    ) -> JSONResponse:
        dataset, view = tracker.transactions(intervalStart, intervalEnd)
        response = TransactionsResponse(
            transactions=view.transactions,
            daily_totals=view.daily_totals,
            period=DataWindow(
                start=intervalStart or dataset.data_window.start,
                end=intervalEnd or dataset.data_window.end,
            ),
            currency=dataset.currency,
            balance=dataset.balance,
            last_updated=dataset.last_updated,
            data_window=dataset.data_window,
        )
        return JSONResponse(content=response.to_json_dict())

    @app.post("/api/resync")
    async def resync(
        body: ResyncRequest | None = None,
        tracker: ExpenseTracker = Depends(get_tracker),
    ) -> JSONResponse:
        body = body or ResyncRequest()
        logger.info("Manual resync requested")
        try:
            dataset = await tracker.refresh(body.start_date, body.end_date)
        except DateWindowError:
            raise
        except TrackerError as e:
            return _failure(500, "Failed to refresh data", str(e))

        response = ResyncResponse(
            last_updated=dataset.last_updated,
            transaction_count=dataset.transaction_count,
            day_count=dataset.day_count,
            data_window=dataset.data_window,
        )
        return JSONResponse(content=response.to_json_dict())

    @app.get("/api/settings")
    async def get_settings(tracker: ExpenseTracker = Depends(get_tracker)) -> JSONResponse:
        try:
            settings = tracker.settings
        except SettingsPersistenceError as e:
            return _failure(500, "Failed to load settings", str(e))
        return JSONResponse(content=settings.to_json_dict())

    @app.post("/api/settings")
    async def update_settings(
        body: SettingsRequest | None = None,
        tracker: ExpenseTracker = Depends(get_tracker),
    ) -> JSONResponse:
        body = body or SettingsRequest()
        try:
            dataset = await tracker.update_settings(body.data_start_date, body.data_end_date)
        except DateWindowError:
            raise
        except SettingsPersistenceError as e:
            return _failure(500, "Failed to save settings", str(e))
        except TrackerError as e:
            return _failure(500, "Failed to update settings", str(e))

        response = SettingsUpdateResponse(
            settings=tracker.settings.to_json_dict(),
            transaction_count=dataset.transaction_count,
            day_count=dataset.day_count,
        )
        return JSONResponse(content=response.to_json_dict())

    @app.get("/api/health")
    async def health(
        check: bool = False,
        tracker: ExpenseTracker = Depends(get_tracker),
    ) -> JSONResponse:
        response = HealthResponse(
            configured=tracker.config.is_configured,
            environment=tracker.config.wise.environment,
            mode=tracker.mode,
        )
        content = response.to_json_dict()
        # ?check=true also probes the provider
        if check:
            content["connector"] = await tracker.connector.health_check()
        return JSONResponse(content=content)

    @app.get("/api/analytics")
    async def analytics(
        intervalStart: str | None = None,
        intervalEnd: str | None = None,
        tracker: ExpenseTracker = Depends(get_tracker),
    ) -> JSONResponse:
        return JSONResponse(content=tracker.analytics(intervalStart, intervalEnd).to_dict())

    @app.get("/api/debug/profiles")
    async def debug_profiles(tracker: ExpenseTracker = Depends(get_tracker)) -> JSONResponse:
        try:
            profiles = await tracker.list_profiles()
        except TrackerError as e:
            return _failure(500, "Failed to fetch profiles", str(e))

        if profiles:
            recommendation = f"You should set WISE_PROFILE_ID={profiles[0].get('id')} in your .env file"
        else:
            recommendation = "No profiles found"
        response = ProfilesResponse(
            current_profile_id=tracker.config.wise.profile_id,
            available_profiles=profiles,
            recommendation=recommendation,
        )
        return JSONResponse(content=response.to_json_dict())

    return app
