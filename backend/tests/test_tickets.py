"""Tests for the Tickets router"""
import asyncio
from dataclasses import replace

import pytest
from httpx import AsyncClient

from conftest import FakeAnalyzer, make_analysis


@pytest.mark.asyncio
async def test_list_tickets(client: AsyncClient):
    r = await client.get("/api/v1/tickets")
    assert r.status_code == 200
    data = r.json()
    assert data["total"] == 4
    assert data["page"] == 1
    assert [t["id"] for t in data["items"]] == ["T-1024", "T-1025", "T-1026", "T-1027"]


@pytest.mark.asyncio
async def test_list_tickets_filters(client: AsyncClient):
    r = await client.get("/api/v1/tickets", params={"status": "open", "product_id": "p3"})
    assert [t["id"] for t in r.json()["items"]] == ["T-1026", "T-1027"]

    r = await client.get("/api/v1/tickets", params={"priority": "CRITICAL"})
    assert [t["id"] for t in r.json()["items"]] == ["T-1027"]

    r = await client.get("/api/v1/tickets", params={"search": "finance", "status": "ALL"})
    assert r.json()["total"] == 2


@pytest.mark.asyncio
async def test_empty_and_lowercase_all_select_everything(client: AsyncClient):
    total = (await client.get("/api/v1/tickets")).json()["total"]
    for params in ({"status": "", "priority": "", "product_id": ""}, {"status": "all", "product_id": "All"}):
        r = await client.get("/api/v1/tickets", params=params)
        assert r.status_code == 200
        assert r.json()["total"] == total
        assert r.json()["view"]["filters"]["product_id"] == "ALL"


@pytest.mark.asyncio
async def test_list_tickets_rejects_unknown_status(client: AsyncClient):
    r = await client.get("/api/v1/tickets", params={"status": "BOGUS"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_pagination_and_reset_on_filter_change(client: AsyncClient, workbench):
    for n in range(12):
        r = await client.post("/api/v1/tickets", json={"title": f"Bulk ticket {n}"})
        assert r.status_code == 201

    r = await client.get("/api/v1/tickets", params={"page": 2})
    data = r.json()
    assert data["total"] == 16
    assert data["total_pages"] == 2
    assert len(data["items"]) == 6
    assert workbench.list_view("tickets").page == 2

    # New query: explicit page is ignored and the view goes back to page 1
    r = await client.get("/api/v1/tickets", params={"search": "bulk", "page": 2})
    data = r.json()
    assert data["page"] == 1
    assert data["total"] == 12


@pytest.mark.asyncio
async def test_out_of_range_page(client: AsyncClient):
    await client.get("/api/v1/tickets")
    r = await client.get("/api/v1/tickets", params={"page": 5})
    assert r.status_code == 400
    r = await client.get("/api/v1/tickets", params={"page": 0})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_create_ticket_defaults(client: AsyncClient):
    r = await client.post("/api/v1/tickets", json={"title": "Printer on fire", "priority": "HIGH"})
    assert r.status_code == 201
    data = r.json()
    assert data["id"].startswith("T-")
    assert data["status"] == "OPEN"
    assert data["reporter_id"] == "u1"
    assert data["created_at"] == data["updated_at"]
    assert data["reporting_month"] == data["created_at"][:7]


@pytest.mark.asyncio
async def test_create_ticket_requires_title(client: AsyncClient):
    r = await client.post("/api/v1/tickets", json={"title": "   "})
    assert r.status_code == 422
    assert "request_id" in r.json()
    r = await client.post("/api/v1/tickets", json={"description": "no title"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_create_ticket_invalid_priority(client: AsyncClient):
    r = await client.post("/api/v1/tickets", json={"title": "x", "priority": "URGENT"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_update_ticket_in_place(client: AsyncClient, workbench, analysis_result):
    workbench.tickets.upsert(replace(workbench.tickets.get("T-1025"), ai_analysis=analysis_result))
    r = await client.put("/api/v1/tickets/T-1025", json={"title": "Avatar upload crash", "status": "RESOLVED"})
    assert r.status_code == 200
    data = r.json()
    assert data["created_at"] == "2023-10-25T14:15:00Z"
    assert data["reporter_id"] == "u8"
    assert data["ai_analysis"]["summary"] == analysis_result.summary
    assert workbench.tickets.ids() == ["T-1024", "T-1025", "T-1026", "T-1027"]
    assert workbench.tickets.get("T-1025").status.value == "RESOLVED"


@pytest.mark.asyncio
async def test_put_unknown_ticket_creates(client: AsyncClient, workbench):
    r = await client.put("/api/v1/tickets/T-9999", json={"title": "Imported"})
    assert r.status_code == 201
    assert workbench.tickets.ids()[-1] == "T-9999"


@pytest.mark.asyncio
async def test_get_ticket_not_found(client: AsyncClient):
    r = await client.get("/api/v1/tickets/T-0000")
    assert r.status_code == 404
    assert r.json()["detail"] == "Ticket not found"


@pytest.mark.asyncio
async def test_delete_requires_confirmation(client: AsyncClient, workbench):
    r = await client.delete("/api/v1/tickets/T-1024")
    assert r.status_code == 409
    assert r.json()["detail"]["code"] == "confirmation_required"
    assert "T-1024" in workbench.tickets

    r = await client.delete("/api/v1/tickets/T-1024", params={"confirm": "true"})
    assert r.status_code == 200
    assert r.json()["deleted"] is True
    assert "T-1024" not in workbench.tickets


@pytest.mark.asyncio
async def test_delete_unknown_ticket_is_noop(client: AsyncClient, workbench):
    r = await client.delete("/api/v1/tickets/T-0000", params={"confirm": "true"})
    assert r.status_code == 200
    assert r.json()["deleted"] is False
    assert len(workbench.tickets) == 4


# ── Selection ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_selection_lifecycle(client: AsyncClient):
    r = await client.get("/api/v1/tickets/selected")
    assert r.json()["ticket"] is None

    r = await client.post("/api/v1/tickets/T-1025/select")
    assert r.status_code == 200

    await client.put("/api/v1/tickets/T-1025", json={"title": "Renamed while open"})
    r = await client.get("/api/v1/tickets/selected")
    assert r.json()["ticket"]["title"] == "Renamed while open"

    await client.delete("/api/v1/tickets/T-1025", params={"confirm": "true"})
    r = await client.get("/api/v1/tickets/selected")
    assert r.json()["ticket"] is None


@pytest.mark.asyncio
async def test_clear_selection(client: AsyncClient):
    await client.post("/api/v1/tickets/T-1024/select")
    r = await client.delete("/api/v1/tickets/selected")
    assert r.status_code == 200
    r = await client.get("/api/v1/tickets/selected")
    assert r.json()["ticket"] is None


@pytest.mark.asyncio
async def test_select_unknown_ticket(client: AsyncClient):
    r = await client.post("/api/v1/tickets/T-0000/select")
    assert r.status_code == 404


# ── AI Assist ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_analyze_ticket(client: AsyncClient, workbench, fake_analyzer):
    r = await client.post("/api/v1/tickets/T-1024/analyze")
    assert r.status_code == 202
    await workbench.analysis.wait("T-1024")

    r = await client.get("/api/v1/tickets/T-1024/analysis")
    data = r.json()
    assert data["running"] is False
    assert data["analysis"]["suggested_priority"] == "HIGH"
    assert fake_analyzer.calls == ["T-1024"]

    r = await client.get("/api/v1/tickets/T-1024")
    assert r.json()["root_cause_category"] == "Network"


@pytest.mark.asyncio
async def test_double_analyze_starts_one_request(client: AsyncClient, workbench):
    analyzer = FakeAnalyzer(result=make_analysis(), gate=asyncio.Event())
    workbench.analysis.analyzer = analyzer

    r1 = await client.post("/api/v1/tickets/T-1027/analyze")
    r2 = await client.post("/api/v1/tickets/T-1027/analyze")
    assert r1.status_code == 202
    assert r2.status_code == 409

    r = await client.get("/api/v1/tickets/T-1027/analysis")
    assert r.json()["running"] is True

    analyzer.gate.set()
    await workbench.analysis.wait("T-1027")
    assert analyzer.calls == ["T-1027"]


@pytest.mark.asyncio
async def test_failed_analysis_leaves_ticket_unchanged(client: AsyncClient, workbench):
    workbench.analysis.analyzer = FakeAnalyzer(result=None)
    before = workbench.tickets.get("T-1026")
    r = await client.post("/api/v1/tickets/T-1026/analyze")
    assert r.status_code == 202
    await workbench.analysis.wait("T-1026")
    assert workbench.tickets.get("T-1026") is before


@pytest.mark.asyncio
async def test_analyze_unknown_ticket(client: AsyncClient):
    r = await client.post("/api/v1/tickets/T-0000/analyze")
    assert r.status_code == 404
