"""Tests for the /api/topics read API, /health and /metrics.

Runs against the repository fixture data through an in-process ASGI transport.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


def _get_app():
    """Build a minimal FastAPI app with the health and topics routers."""
    from fastapi import FastAPI

    from quiethours.routers import health, topics

    app = FastAPI()
    app.include_router(health.router)
    app.include_router(topics.router)
    return app


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=_get_app()), base_url="http://test") as ac:
        yield ac


class TestTopics:
    @pytest.mark.asyncio
    async def test_list_topics(self, client):
        resp = await client.get("/api/topics")
        assert resp.status_code == 200
        data = resp.json()
        assert [t["topic_id"] for t in data] == ["quiet-hours", "parking-rules", "bulk-trash", "fireworks"]
        assert data[0]["href"] == "/"
        assert data[3]["href"] == "/fireworks"

    @pytest.mark.asyncio
    async def test_dataset(self, client):
        resp = await client.get("/api/topics/quiet-hours/dataset")
        assert resp.status_code == 200
        data = resp.json()
        assert data["source"] == "json"
        assert data["count"] == 6
        assert len(data["records"]) == 6

    @pytest.mark.asyncio
    async def test_unknown_topic_404(self, client):
        resp = await client.get("/api/topics/snow-removal/dataset")
        assert resp.status_code == 404
        assert "snow-removal" in resp.json()["detail"]


class TestListings:
    @pytest.mark.asyncio
    async def test_countries(self, client):
        resp = await client.get("/api/topics/quiet-hours/countries")
        assert resp.status_code == 200
        assert [c["country_slug"] for c in resp.json()] == ["canada", "united-states"]

    @pytest.mark.asyncio
    async def test_regions(self, client):
        resp = await client.get("/api/topics/quiet-hours/countries/canada/regions")
        assert [r["region"] for r in resp.json()] == ["Alberta", "British Columbia", "Ontario"]

    @pytest.mark.asyncio
    async def test_fireworks_regions_include_override_counts(self, client):
        resp = await client.get("/api/topics/fireworks/countries/united-states/regions")
        colorado = resp.json()[0]
        assert colorado["region_slug"] == "colorado"
        assert colorado["has_state_rule"] is True
        assert colorado["city_count"] == 1

    @pytest.mark.asyncio
    async def test_cities(self, client):
        resp = await client.get("/api/topics/quiet-hours/countries/united-states/regions/new-york/cities")
        assert resp.json() == [
            {"city": "New York City", "city_slug": "new-york-city", "last_verified": "2025-05-30"}
        ]

    @pytest.mark.asyncio
    async def test_params(self, client):
        resp = await client.get("/api/topics/parking-rules/params")
        assert resp.json() == [
            {
                "country_slug": "united-states",
                "region_slug": "illinois",
                "city_slug": "chicago",
                "jurisdiction_level": None,
            }
        ]

    @pytest.mark.asyncio
    async def test_slug_index(self, client):
        resp = await client.get("/api/topics/bulk-trash/slug-index")
        assert list(resp.json()) == ["united-states__arizona__phoenix"]


class TestRecords:
    @pytest.mark.asyncio
    async def test_city_record(self, client):
        resp = await client.get("/api/topics/quiet-hours/records/canada/ontario/toronto")
        assert resp.status_code == 200
        data = resp.json()
        assert data["path"] == "/canada/ontario/toronto"
        assert data["record"]["complaint_channel"] == "Toronto 311 (phone, online or app)"
        assert data["record"]["templates"]["neighbor_message"].startswith("Hi neighbour")

    @pytest.mark.asyncio
    async def test_missing_record_404(self, client):
        resp = await client.get("/api/topics/quiet-hours/records/canada/ontario/ottawa")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_region_record(self, client):
        resp = await client.get("/api/topics/fireworks/records/united-states/colorado")
        assert resp.status_code == 200
        record = resp.json()["record"]
        assert record["allowed_consumer_fireworks"] == "restricted"
        assert record["county_overrides"][1] == {
            "county": "Jefferson County",
            "rules": "Banned during stage 1 fire restrictions: no exceptions",
        }

    @pytest.mark.asyncio
    async def test_region_record_for_city_topic_404(self, client):
        resp = await client.get("/api/topics/parking-rules/records/united-states/illinois")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_hero_image(self, client, data_copy, monkeypatch):
        from quiethours.config import settings

        (data_copy / "heroImages.json").write_text('{"canada__alberta__calgary": "/hero/hero-canada-alberta-calgary.jpg"}')
        monkeypatch.setattr(settings, "data_dir", data_copy)

        resp = await client.get("/api/topics/hero/canada/alberta/calgary")
        assert resp.status_code == 200
        assert resp.json() == {"hero_image": "/hero/hero-canada-alberta-calgary.jpg"}

        resp = await client.get("/api/topics/hero/canada/ontario/toronto")
        assert resp.status_code == 404


class TestSearchAndNav:
    @pytest.mark.asyncio
    async def test_search_index(self, client):
        resp = await client.get("/api/topics/search-index")
        assert resp.status_code == 200
        assert len(resp.json()) == 11

    @pytest.mark.asyncio
    async def test_nav(self, client):
        resp = await client.get("/api/topics/nav/united-states/massachusetts", params={"city_slug": "boston"})
        assert [e["topic"] for e in resp.json()] == ["quiet-hours", "fireworks"]


class TestHealthAndMetrics:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["artifacts"]["bulk-trash"] == "json"

    @pytest.mark.asyncio
    async def test_metrics_exposed(self):
        from quiethours.main import app

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            await ac.get("/api/topics/quiet-hours/dataset")
            resp = await ac.get("/metrics/")
        assert resp.status_code == 200
        assert "quiethours_dataset_loads_total" in resp.text
