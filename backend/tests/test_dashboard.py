"""Tests for the Dashboard router"""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_dashboard_overview(client: AsyncClient):
    r = await client.get("/api/v1/dashboard")
    assert r.status_code == 200
    data = r.json()
    assert data["stats"]["critical_tickets"] == 1
    assert data["stats"]["releases"] == 2
    assert data["stats"]["documents"] == 50
    assert data["current_version"]["id"] == "v3"
    assert len(data["recent_tickets"]) == 3
    assert len(data["recent_documents"]) == 5


@pytest.mark.asyncio
async def test_dashboard_timeline_uses_fixed_window(client: AsyncClient):
    r = await client.get("/api/v1/dashboard")
    timeline = r.json()["timeline"]
    assert timeline["window"]["start"] == "2023-10-01"
    assert timeline["window"]["end"] == "2024-01-31"

    rows = {row["version"]["id"]: row["bar"] for row in timeline["rows"]}
    assert rows["v1"] is None
    assert rows["v2"] is None
    # v3 runs past the window end, v4 starts before it
    assert rows["v3"]["left_percent"] == 0
    assert abs(rows["v3"]["width_percent"] - 100) < 1e-9
    assert rows["v4"]["left_percent"] == 0
    assert abs(rows["v4"]["width_percent"] - 90 / 122 * 100) < 1e-9


@pytest.mark.asyncio
async def test_current_version_falls_back_to_first(client: AsyncClient, workbench):
    await client.delete("/api/v1/versions/v3", params={"confirm": "true"})
    r = await client.get("/api/v1/dashboard")
    assert r.json()["current_version"]["id"] == "v1"


@pytest.mark.asyncio
async def test_critical_count_follows_ticket_edits(client: AsyncClient):
    await client.post("/api/v1/tickets", json={"title": "Outage", "priority": "CRITICAL"})
    r = await client.get("/api/v1/dashboard")
    assert r.json()["stats"]["critical_tickets"] == 2


@pytest.mark.asyncio
async def test_releases_feed(client: AsyncClient):
    r = await client.get("/api/v1/dashboard/releases")
    data = r.json()
    assert data["total"] == 2
    assert data["releases"][0]["type"] == "Hotfix"
