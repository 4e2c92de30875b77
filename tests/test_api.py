"""Tests for the HTTP API."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from conftest import make_snapshot
from wisetracker.api.server import create_app
from wisetracker.config import TrackerConfig
from wisetracker.connectors.base import BaseConnector
from wisetracker.connectors.mock_connector import MockConnector
from wisetracker.connectors.wise_connector import WiseConnector
from wisetracker.errors import UpstreamError
from wisetracker.settings import Settings, SettingsStore
from wisetracker.tracker import ExpenseTracker


def _tracker(tmp_path: Path, *results, **config) -> ExpenseTracker:  # noqa: ANN002, ANN003
    store = SettingsStore(tmp_path / "settings.json")
    store.save(Settings(data_start_date="2025-12-01", data_end_date="2025-12-05"))

    connector = AsyncMock(spec=BaseConnector)
    connector.name = "stub"
    connector.fetch = AsyncMock(side_effect=list(results))
    return ExpenseTracker(
        config=TrackerConfig(settings_file=str(store.path), **config),
        connector=connector,
        settings_store=store,
    )


@pytest.fixture
def empty_tracker(tmp_path: Path) -> ExpenseTracker:
    return _tracker(tmp_path, make_snapshot([]))


@pytest.fixture
def ready_client(tmp_path: Path, december_activities):  # noqa: ANN001, ANN201
    tracker = _tracker(tmp_path, make_snapshot(december_activities), UpstreamError("upstream down"), mock_mode=True)
    with TestClient(create_app(tracker)) as client:
        yield client


class TestStartup:
    def test_not_ready_before_first_refresh(self, empty_tracker: ExpenseTracker) -> None:
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            resp = client.get("/api/transactions")
        assert resp.status_code == 503
        body = resp.json()
        assert body["error"].startswith("Data not available yet")
        assert "suggestion" in body

    def test_analytics_not_ready(self, empty_tracker: ExpenseTracker) -> None:
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            assert client.get("/api/analytics").status_code == 503

    def test_unconfigured_live_mode_skips_startup_fetch(self, empty_tracker: ExpenseTracker) -> None:
        with TestClient(create_app(empty_tracker)) as client:
            assert client.get("/api/transactions").status_code == 503
        empty_tracker.connector.fetch.assert_not_awaited()

    def test_startup_failure_keeps_serving(self, tmp_path: Path) -> None:
        tracker = _tracker(tmp_path, UpstreamError("boom"), mock_mode=True)
        with TestClient(create_app(tracker)) as client:
            assert client.get("/api/health").status_code == 200
            assert client.get("/api/transactions").status_code == 503

    def test_malformed_wise_balance_keeps_serving(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path / "settings.json")
        connector = WiseConnector(credentials={"api_token": "tok", "profile_id": "12345"})
        tracker = ExpenseTracker(
            config=TrackerConfig(settings_file=str(store.path), wise={"api_token": "tok", "profile_id": "12345"}),
            connector=connector,
            settings_store=store,
        )

        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = [{"amount": {"value": 10, "currency": "JPY"}, "reservedAmount": "x"}]

        with patch.object(connector, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.get = AsyncMock(return_value=resp)
            mock_get_client.return_value = mock_client

            with TestClient(create_app(tracker)) as client:
                assert client.get("/api/transactions").status_code == 503
                resync = client.post("/api/resync")

        assert resync.status_code == 500
        body = resync.json()
        assert body["success"] is False
        assert body["error"] == "Failed to refresh data"
        assert "Unexpected balance payload" in body["details"]


class TestTransactions:
    def test_full_dataset(self, ready_client: TestClient) -> None:
        resp = ready_client.get("/api/transactions")
        assert resp.status_code == 200
        body = resp.json()

        assert [t["id"] for t in body["transactions"]] == ["A3", "A2", "A1"]
        assert body["dailyTotals"]["2025-12-02"]["total"] == 2000
        assert body["dailyTotals"]["2025-12-02"]["count"] == 2
        assert body["dailyTotals"]["2025-12-04"]["total"] == 1000
        assert body["period"] == {"start": "2025-12-01", "end": "2025-12-05"}
        assert body["dataWindow"] == {"start": "2025-12-01", "end": "2025-12-05"}
        assert body["currency"] == "JPY"
        assert body["balance"] == {"current": 5000, "reserved": 0, "available": 5000}
        assert body["cached"] is True
        assert body["lastUpdated"]

    def test_interval_filter(self, ready_client: TestClient) -> None:
        resp = ready_client.get("/api/transactions", params={"intervalStart": "2025-12-03"})
        body = resp.json()
        assert [t["id"] for t in body["transactions"]] == ["A3"]
        assert list(body["dailyTotals"]) == ["2025-12-04"]
        assert body["period"] == {"start": "2025-12-03", "end": "2025-12-05"}

    def test_bad_interval(self, ready_client: TestClient) -> None:
        resp = ready_client.get("/api/transactions", params={"intervalEnd": "soon"})
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_zero_transactions(self, tmp_path: Path) -> None:
        tracker = _tracker(tmp_path, make_snapshot([]), mock_mode=True)
        with TestClient(create_app(tracker)) as client:
            resp = client.get("/api/transactions")
        assert resp.status_code == 200
        assert resp.json()["dailyTotals"] == {}
        assert resp.json()["transactions"] == []


class TestResync:
    def test_failure_preserves_cache(self, ready_client: TestClient) -> None:
        before = ready_client.get("/api/transactions").json()

        resp = ready_client.post("/api/resync", json={})
        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Failed to refresh data"
        assert body["details"] == "upstream down"

        after = ready_client.get("/api/transactions").json()
        assert after["lastUpdated"] == before["lastUpdated"]
        assert after["transactions"] == before["transactions"]

    def test_success(self, tmp_path: Path) -> None:
        tracker = _tracker(tmp_path, make_snapshot([]), make_snapshot([]), mock_mode=True)
        with TestClient(create_app(tracker)) as client:
            resp = client.post("/api/resync", json={"startDate": "2025-11-01", "endDate": "2025-11-30"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["transactionCount"] == 0
        assert body["dayCount"] == 0
        assert body["dataWindow"] == {"start": "2025-11-01", "end": "2025-11-30"}

    def test_without_body(self, tmp_path: Path) -> None:
        tracker = _tracker(tmp_path, make_snapshot([]))
        with TestClient(create_app(tracker, refresh_on_startup=False)) as client:
            resp = client.post("/api/resync")
        assert resp.status_code == 200
        assert resp.json()["dataWindow"] == {"start": "2025-12-01", "end": "2025-12-05"}

    def test_invalid_dates(self, empty_tracker: ExpenseTracker) -> None:
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            resp = client.post("/api/resync", json={"startDate": "12/01/2025"})
        assert resp.status_code == 400


class TestSettings:
    def test_get(self, empty_tracker: ExpenseTracker) -> None:
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            resp = client.get("/api/settings")
        assert resp.json() == {"dataStartDate": "2025-12-01", "dataEndDate": "2025-12-05"}

    def test_start_after_end_is_rejected(self, ready_client: TestClient, tmp_path: Path) -> None:
        before = ready_client.get("/api/transactions").json()

        resp = ready_client.post("/api/settings", json={"dataStartDate": "2025-12-31", "dataEndDate": "2025-12-01"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "Start date must be before end date"

        assert ready_client.get("/api/settings").json()["dataStartDate"] == "2025-12-01"
        assert json.loads((tmp_path / "settings.json").read_text())["dataStartDate"] == "2025-12-01"
        assert ready_client.get("/api/transactions").json() == before

    @pytest.mark.parametrize(
        "payload,message",
        [
            ({"dataStartDate": "2025-01-01"}, "Both dataStartDate and dataEndDate are required"),
            ({"dataStartDate": "2025-01-01", "dataEndDate": "Jan 31"}, "Invalid date format for dataEndDate"),
        ],
    )
    def test_validation(self, empty_tracker: ExpenseTracker, payload: dict, message: str) -> None:
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            resp = client.post("/api/settings", json=payload)
        assert resp.status_code == 400
        assert resp.json()["error"].startswith(message)

    def test_non_string_dates(self, empty_tracker: ExpenseTracker, tmp_path: Path) -> None:
        saved = (tmp_path / "settings.json").read_text()
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            resp = client.post("/api/settings", json={"dataStartDate": 20251201, "dataEndDate": 20251205})
        assert resp.status_code == 400
        assert "dataStartDate" in resp.json()["error"]
        assert "detail" not in resp.json()
        assert (tmp_path / "settings.json").read_text() == saved
        empty_tracker.connector.fetch.assert_not_awaited()

    @pytest.mark.parametrize("path", ["/api/settings", "/api/resync"])
    def test_malformed_json_body(self, empty_tracker: ExpenseTracker, path: str) -> None:
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            resp = client.post(path, content=b"{not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Invalid request")
        empty_tracker.connector.fetch.assert_not_awaited()

    def test_update_refreshes(self, empty_tracker: ExpenseTracker) -> None:
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            resp = client.post("/api/settings", json={"dataStartDate": "2025-01-01", "dataEndDate": "2025-01-31"})
            assert resp.status_code == 200
            body = resp.json()
            assert body["success"] is True
            assert body["settings"] == {"dataStartDate": "2025-01-01", "dataEndDate": "2025-01-31"}
            assert body["transactionCount"] == 0
            assert client.get("/api/transactions").status_code == 200

    def test_refresh_failure(self, ready_client: TestClient) -> None:
        resp = ready_client.post("/api/settings", json={"dataStartDate": "2025-01-01", "dataEndDate": "2025-01-31"})
        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to update settings"


class TestHealthAndAnalytics:
    def test_health(self, empty_tracker: ExpenseTracker) -> None:
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            body = client.get("/api/health").json()
        assert body == {"status": "ok", "configured": False, "environment": "sandbox", "mode": "live"}

    def test_health_with_connector_check(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path / "settings.json")
        tracker = ExpenseTracker(
            config=TrackerConfig(settings_file=str(store.path), mock_mode=True),
            connector=MockConnector(),
            settings_store=store,
        )
        with TestClient(create_app(tracker, refresh_on_startup=False)) as client:
            body = client.get("/api/health", params={"check": "true"}).json()
        assert body["mode"] == "mock"
        assert body["connector"] == {"connector": "mock", "healthy": True, "error": None}

    def test_health_check_reports_invalid_credentials(self, tmp_path: Path) -> None:
        store = SettingsStore(tmp_path / "settings.json")
        connector = WiseConnector(credentials={})
        tracker = ExpenseTracker(
            config=TrackerConfig(settings_file=str(store.path)),
            connector=connector,
            settings_store=store,
        )
        with TestClient(create_app(tracker, refresh_on_startup=False)) as client:
            body = client.get("/api/health?check=true").json()
        assert body["connector"]["connector"] == "wise"
        assert body["connector"]["healthy"] is False

    def test_analytics(self, ready_client: TestClient) -> None:
        resp = ready_client.get("/api/analytics")
        assert resp.status_code == 200
        body = resp.json()
        assert body["budget"]["totalBudget"] == 8000
        assert body["budget"]["spentPercentage"] == 37.5
        assert body["categories"][0]["key"] == "convenience"
        assert len(body["forecast"]) == 14

    def test_debug_profiles_without_wise(self, ready_client: TestClient) -> None:
        resp = ready_client.get("/api/debug/profiles")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to fetch profiles"

    def test_debug_profiles(self, empty_tracker: ExpenseTracker) -> None:
        empty_tracker.connector.list_profiles = AsyncMock(return_value=[{"id": 42, "type": "personal"}])
        with TestClient(create_app(empty_tracker, refresh_on_startup=False)) as client:
            body = client.get("/api/debug/profiles").json()
        assert body["availableProfiles"] == [{"id": 42, "type": "personal"}]
        assert body["recommendation"] == "You should set WISE_PROFILE_ID=42 in your .env file"
