"""
API tests for feed endpoints.

Tests cover:
- Feed state for the default context
- Stream listings
- Tab activation and refresh
- Filter changes and validation errors (400, 422)
- Balance summary
"""

from fastapi.testclient import TestClient


# =============================================================================
# FEED STATE TESTS
# =============================================================================


class TestGetFeed:
    """Tests for GET /feed."""

    def test_default_context_after_startup(self, client: TestClient):
        """
        GIVEN the app started with the stub source
        WHEN I GET /feed
        THEN trades are loaded for all accounts on testnet and other tabs are not
        """
        response = client.get("/feed")

        assert response.status_code == 200
        data = response.json()
        assert data["cache_key"] == "all_testnet_nowallet"
        assert data["environment"] == "testnet"
        assert data["account"] == "all"
        assert len(data["trades"]) == 60
        assert data["decisions"] == []
        states = {s["stream"]: s["state"] for s in data["streams"]}
        assert states == {"trades": "READY", "decisions": "UNINITIALIZED", "positions": "UNINITIALIZED"}

    def test_trades_newest_first(self, client: TestClient):
        trades = client.get("/feed/trades").json()

        times = [t["trade_time"] for t in trades]
        assert times == sorted(times, reverse=True)
        assert "price" in trades[0]
        assert trades[0]["environment"] == "testnet"

    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "healthy"}


# =============================================================================
# TAB AND REFRESH TESTS
# =============================================================================


class TestTabsAndRefresh:
    """Tests for POST /feed/tabs/{stream} and POST /feed/refresh."""

    def test_activate_decisions_tab(self, client: TestClient):
        """
        GIVEN decisions were never loaded
        WHEN I POST /feed/tabs/decisions
        THEN decisions are READY with 60 entries
        """
        response = client.post("/feed/tabs/decisions")

        assert response.status_code == 200
        data = response.json()
        assert data["stream"] == "decisions"
        assert data["state"] == "READY"
        assert data["count"] == 60
        assert data["loading"] is False
        assert len(client.get("/feed/decisions").json()) == 60

    def test_unknown_stream_returns_422(self, client: TestClient):
        assert client.post("/feed/tabs/balances").status_code == 422

    def test_manual_refresh_loads_everything(self, client: TestClient):
        response = client.post("/feed/refresh", json={})

        assert response.status_code == 200
        data = response.json()
        assert data["refreshed"] is True
        assert {s["state"] for s in data["streams"]} == {"READY"}

    def test_repeated_refresh_token_skipped(self, client: TestClient):
        """
        GIVEN a refresh already ran for token 7
        WHEN token 7 is posted again
        THEN nothing is refreshed
        """
        client.post("/feed/refresh", json={"refresh_token": 7})

        response = client.post("/feed/refresh", json={"refresh_token": 7})

        assert response.json()["refreshed"] is False


# =============================================================================
# FILTER TESTS
# =============================================================================


class TestChangeFilter:
    """Tests for PUT /feed/filter."""

    def test_switch_account_and_environment(self, client: TestClient):
        """
        GIVEN the default all-accounts testnet context
        WHEN I PUT /feed/filter for account 2 on mainnet
        THEN every stream is reloaded for account 2 on mainnet
        """
        response = client.put("/feed/filter", json={"environment": "mainnet", "account": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["cache_key"] == "2_mainnet_nowallet"
        assert data["account"] == 2
        assert {t["account_id"] for t in data["trades"]} == {2}
        assert {t["environment"] for t in data["trades"]} == {"mainnet"}
        assert [p["account_id"] for p in data["positions"]] == [2]
        assert len(data["decisions"]) == 20

    def test_invalid_account_returns_400(self, client: TestClient):
        response = client.put("/feed/filter", json={"environment": "testnet", "account": "abc"})

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_unknown_environment_returns_422(self, client: TestClient):
        response = client.put("/feed/filter", json={"environment": "devnet"})

        assert response.status_code == 422


# =============================================================================
# SUMMARY TESTS
# =============================================================================


class TestSummary:
    """Tests for GET /feed/summary."""

    def test_summary_after_positions_load(self, client: TestClient):
        """
        GIVEN positions loaded for the three stub accounts
        WHEN I GET /feed/summary
        THEN each account has a margin status and accounts are ordered by name
        """
        client.post("/feed/tabs/positions")

        data = client.get("/feed/summary").json()

        names = [a["account_name"] for a in data["accounts"]]
        assert names == ["Claude Trader", "DeepSeek Trader", "Qwen Trader"]
        for account in data["accounts"]:
            assert account["margin_status"] in {"HEALTHY", "MODERATE", "HIGH_RISK"}
            assert account["position_count"] == 2
            assert account["aggregates_stale"] is False

    def test_summary_empty_before_positions_load(self, client: TestClient):
        data = client.get("/feed/summary").json()

        assert data["accounts"] == []
