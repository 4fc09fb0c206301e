"""
Tickets Router - Ticket list, detail selection and AI triage assist
List with search/status/priority/product filters and pagination, upsert
and delete, the open-ticket selection, and background LLM analysis.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field, field_validator

from filtering import filter_tickets
from models import TicketPriority, TicketRecord, TicketStatus, new_id, utcnow
from routers.common import enum_filter, id_filter, not_found, page_payload, require_confirmation, select_page
from workbench import Workbench, get_workbench

router = APIRouter(prefix="/api/v1/tickets", tags=["Tickets"])


# ── Schemas ──────────────────────────────────────────────────

class TicketPayload(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: str = ""
    status: TicketStatus = TicketStatus.OPEN
    priority: TicketPriority = TicketPriority.MEDIUM
    type: str = ""
    customer_name: str = ""
    reporter_id: Optional[str] = None
    assignee_id: Optional[str] = None
    test_owner: Optional[str] = None
    dev_owner: Optional[str] = None
    product_id: str = ""
    product_version: str = ""
    target_version: Optional[str] = None
    root_cause_category: Optional[str] = None
    introduction_stage: Optional[str] = None
    solution: Optional[str] = None
    estimated_resolution_time: Optional[str] = None
    review_status: Optional[str] = None
    reporting_month: Optional[str] = None
    attachment_url: Optional[str] = None
    tags: List[str] = []

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


def _build_ticket(wb: Workbench, ticket_id: str, body: TicketPayload, existing: Optional[TicketRecord]) -> TicketRecord:
    """Draft → record. Creation stamps survive edits, and so does a stored AI analysis."""
    now = utcnow().isoformat()
    data = body.model_dump()
    data["reporter_id"] = data["reporter_id"] or (existing.reporter_id if existing else wb.user.id)
    data["reporting_month"] = data["reporting_month"] or (existing.reporting_month if existing else now[:7])
    return TicketRecord(
        id=ticket_id,
        created_at=existing.created_at if existing else now,
        updated_at=now,
        ai_analysis=existing.ai_analysis if existing else None,
        **data,
    )


# ── List & Selection ─────────────────────────────────────────

@router.get("")
async def list_tickets(
    search: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    product_id: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    wb: Workbench = Depends(get_workbench),
):
    status_f = enum_filter(status, TicketStatus, "status")
    priority_f = enum_filter(priority, TicketPriority, "priority")
    product_f = id_filter(product_id)

    view = wb.list_view("tickets")
    changed = view.update(search, status=status_f, priority=priority_f, product_id=product_f)
    tickets = filter_tickets(wb.tickets, view.query, status_f, priority_f, product_f)
    result = select_page(view, tickets, page, changed)
    return page_payload(result, view)


@router.get("/selected")
async def get_selected_ticket(wb: Workbench = Depends(get_workbench)):
    current = wb.selection.current
    return {"ticket": current.to_dict() if current else None}


@router.delete("/selected")
async def clear_selected_ticket(wb: Workbench = Depends(get_workbench)):
    wb.selection.clear()
    return {"status": "cleared"}


@router.post("/{ticket_id}/select")
async def select_ticket(ticket_id: str, wb: Workbench = Depends(get_workbench)):
    ticket = wb.tickets.get(ticket_id)
    if not ticket:
        raise not_found("Ticket")
    wb.selection.select(ticket)
    return {"status": "selected", "ticket": ticket.to_dict()}


# ── CRUD ─────────────────────────────────────────────────────

@router.get("/{ticket_id}")
async def get_ticket(ticket_id: str, wb: Workbench = Depends(get_workbench)):
    ticket = wb.tickets.get(ticket_id)
    if not ticket:
        raise not_found("Ticket")
    return ticket.to_dict()


@router.post("", status_code=201)
async def create_ticket(body: TicketPayload, wb: Workbench = Depends(get_workbench)):
    ticket = wb.tickets.upsert(_build_ticket(wb, new_id("T-"), body, None))
    return ticket.to_dict()


@router.put("/{ticket_id}")
async def upsert_ticket(
    ticket_id: str,
    body: TicketPayload,
    response: Response,
    wb: Workbench = Depends(get_workbench),
):
    existing = wb.tickets.get(ticket_id)
    ticket = wb.tickets.upsert(_build_ticket(wb, ticket_id, body, existing))
    if existing is None:
        response.status_code = 201
    return ticket.to_dict()


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: str,
    confirm: bool = False,
    wb: Workbench = Depends(get_workbench),
):
    require_confirmation(confirm, "ticket")
    deleted = wb.tickets.delete(ticket_id)
    return {"status": "deleted" if deleted else "absent", "id": ticket_id, "deleted": deleted}


# ── AI Assist ────────────────────────────────────────────────

@router.post("/{ticket_id}/analyze", status_code=202)
async def analyze_ticket(ticket_id: str, wb: Workbench = Depends(get_workbench)):
    if ticket_id not in wb.tickets:
        raise not_found("Ticket")
    if not wb.analysis.request(ticket_id):
        raise HTTPException(409, "Analysis already in progress for this ticket")
    return {"status": "started", "ticket_id": ticket_id}


@router.get("/{ticket_id}/analysis")
async def get_ticket_analysis(ticket_id: str, wb: Workbench = Depends(get_workbench)):
    ticket = wb.tickets.get(ticket_id)
    if not ticket:
        raise not_found("Ticket")
    return {
        "ticket_id": ticket_id,
        "running": wb.analysis.is_running(ticket_id),
        "analysis": ticket.ai_analysis.to_dict() if ticket.ai_analysis else None,
    }
