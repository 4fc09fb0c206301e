"""Tests for the Versions router"""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_versions_hides_archived(client: AsyncClient):
    r = await client.get("/api/v1/versions")
    assert r.status_code == 200
    data = r.json()
    assert [v["id"] for v in data["items"]] == ["v1", "v3", "v4"]
    assert data["window"]["start"] == "2024-10-01"
    assert data["window"]["end"] == "2025-02-28"


@pytest.mark.asyncio
async def test_list_versions_show_archived_and_search(client: AsyncClient):
    r = await client.get("/api/v1/versions", params={"show_archived": "true"})
    assert r.json()["total"] == 4

    r = await client.get("/api/v1/versions", params={"search": "v2.1", "show_archived": "true"})
    assert [v["id"] for v in r.json()["items"]] == ["v2"]


@pytest.mark.asyncio
async def test_rows_carry_rolling_window_bars(client: AsyncClient):
    r = await client.get("/api/v1/versions")
    rows = {v["id"]: v for v in r.json()["items"]}
    # v1 and v4 ended in 2023: no bar
    assert rows["v1"]["bar"] is None
    assert rows["v4"]["bar"] is None
    bar = rows["v3"]["bar"]
    assert bar["left_percent"] == 0
    assert abs(bar["width_percent"] - 114 / 150 * 100) < 1e-9


@pytest.mark.asyncio
async def test_roadmap(client: AsyncClient):
    for n in range(16):
        await client.post("/api/v1/versions", json={
            "product_name": "Load Test", "version": f"v0.{n}",
            "start_date": "2024-11-01", "end_date": "2024-12-31",
        })
    r = await client.get("/api/v1/versions/roadmap")
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 19
    assert data["limit"] == 15
    assert len(data["rows"]) == 15
    assert [m[:7] for m in data["window"]["months"]] == ["2024-10", "2024-11", "2024-12", "2025-01", "2025-02"]
    new_row = data["rows"][3]
    assert new_row["version"]["version"] == "v0.0"
    assert abs(new_row["bar"]["left_percent"] - 31 / 150 * 100) < 1e-9


@pytest.mark.asyncio
async def test_statuses(client: AsyncClient):
    r = await client.get("/api/v1/versions/statuses")
    data = r.json()
    assert "UAT_VERIFYING" in data["statuses"]
    assert data["types"] == ["STANDARD", "CUSTOMIZED", "HOTFIX"]


@pytest.mark.asyncio
async def test_create_version_defaults_start_date(client: AsyncClient):
    r = await client.post("/api/v1/versions", json={"product_name": "工作流产品", "version": "v9.2", "progress": 250})
    assert r.status_code == 201
    data = r.json()
    assert data["id"].startswith("v")
    assert data["start_date"] == "2024-11-15"
    assert data["progress"] == 100
    assert data["status"] == "PLANNING"


@pytest.mark.asyncio
async def test_new_version_without_end_date_has_no_bar(client: AsyncClient):
    r = await client.post("/api/v1/versions", json={"product_name": "X", "version": "v1"})
    r = await client.get(f"/api/v1/versions/{r.json()['id']}")
    assert r.json()["bar"] is None


@pytest.mark.asyncio
async def test_create_version_requires_label(client: AsyncClient):
    r = await client.post("/api/v1/versions", json={"product_name": "X", "version": " "})
    assert r.status_code == 422
    r = await client.post("/api/v1/versions", json={"version": "v1"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_update_version_keeps_position(client: AsyncClient, workbench):
    r = await client.put("/api/v1/versions/v3", json={
        "product_name": "前端开发框架", "version": "v2.2", "status": "UAT_READY", "progress": 80,
        "start_date": "2023-10-01", "end_date": "2025-01-23",
    })
    assert r.status_code == 200
    assert workbench.versions.ids() == ["v1", "v2", "v3", "v4"]
    assert workbench.versions.get("v3").status.value == "UAT_READY"


@pytest.mark.asyncio
async def test_delete_version_leaves_documents_and_outbound(client: AsyncClient, workbench):
    docs_before = [d for d in workbench.documents if d.version_id == "v1"]

    r = await client.delete("/api/v1/versions/v1", params={"confirm": "true"})
    assert r.status_code == 200
    assert "v1" not in workbench.versions

    docs_after = [d for d in workbench.documents if d.version_id == "v1"]
    assert docs_after == docs_before
    assert len(docs_after) == 25

    r = await client.get("/api/v1/documents", params={"version_id": "v1"})
    assert r.json()["total"] == 25
    assert r.json()["version"] is None


@pytest.mark.asyncio
async def test_delete_version_requires_confirmation(client: AsyncClient, workbench):
    r = await client.delete("/api/v1/versions/v1")
    assert r.status_code == 409
    assert "v1" in workbench.versions


@pytest.mark.asyncio
async def test_get_version_not_found(client: AsyncClient):
    r = await client.get("/api/v1/versions/v404")
    assert r.status_code == 404
