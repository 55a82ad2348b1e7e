"""Tests for health endpoint."""

from unittest.mock import patch

from tests.conftest import make_settings


class TestHealthEndpoint:
    async def test_health_ok_when_configured(self, client):
        with patch("agent_proxy.routes.health.settings", make_settings()):
            resp = await client.get("/api/health")

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["openai_configured"] is True
        assert data["search_engine"] == "duckduckgo"

    async def test_health_degraded_when_no_key(self, client):
        with patch("agent_proxy.routes.health.settings", make_settings(openai_api_key="")):
            resp = await client.get("/api/health")

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "degraded"
        assert data["openai_configured"] is False

    async def test_health_reports_search_engine(self, client):
        with patch(
            "agent_proxy.routes.health.settings",
            make_settings(serpapi_api_key="serp"),
        ):
            resp = await client.get("/api/health")

        data = resp.json()
        assert set(data.keys()) == {"status", "version", "openai_configured", "search_engine"}
        assert data["search_engine"] == "serpapi"
