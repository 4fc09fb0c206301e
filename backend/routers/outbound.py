"""
Outbound Requests Router - Release-out applications and their review
New requests enter PENDING at the top of the list; approving or
rejecting one stamps the current user as operator.
"""

from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, field_validator

from filtering import filter_outbound
from models import OutboundRequestRecord, OutboundStatus, new_id
from routers.common import enum_filter, not_found, page_payload, require_confirmation, select_page
from workbench import Workbench, get_workbench

router = APIRouter(prefix="/api/v1/outbound", tags=["Outbound Requests"])

OPERATION_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


# ── Schemas ──────────────────────────────────────────────────

class OutboundCreate(BaseModel):
    product_id: str = Field(..., min_length=1)
    version_id: str = Field(..., min_length=1)
    applicant: str = Field(..., min_length=1, max_length=200)
    project_side: str = Field(..., min_length=1, max_length=200)
    requirements: Optional[str] = None
    artifact_url: Optional[str] = None
    document_url: Optional[str] = None
    application_date: Optional[str] = None

    @field_validator("applicant", "project_side")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


def _decide(wb: Workbench, request_id: str, status: OutboundStatus) -> OutboundRequestRecord:
    request = wb.outbound_requests.get(request_id)
    if not request:
        raise not_found("Outbound request")
    return wb.outbound_requests.upsert(replace(
        request,
        status=status,
        operator=wb.user.name,
        operation_time=wb.now().strftime(OPERATION_TIME_FORMAT),
    ))


# ── Endpoints ────────────────────────────────────────────────

@router.get("")
async def list_outbound(
    search: Optional[str] = None,
    status: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    wb: Workbench = Depends(get_workbench),
):
    status_f = enum_filter(status, OutboundStatus, "status")
    view = wb.list_view("outbound")
    changed = view.update(search, status=status_f)
    requests = filter_outbound(wb.outbound_requests, view.query, status_f)
    result = select_page(view, requests, page, changed)
    return page_payload(result, view)


@router.get("/{request_id}")
async def get_outbound(request_id: str, wb: Workbench = Depends(get_workbench)):
    request = wb.outbound_requests.get(request_id)
    if not request:
        raise not_found("Outbound request")
    return request.to_dict()


@router.post("", status_code=201)
async def create_outbound(body: OutboundCreate, wb: Workbench = Depends(get_workbench)):
    product_name, version_label = wb.denormalize_outbound(body.product_id, body.version_id)
    request = OutboundRequestRecord(
        id=new_id("OB-"),
        application_date=body.application_date or wb.today().isoformat(),
        product_id=body.product_id,
        product_name=product_name,
        version_id=body.version_id,
        version=version_label,
        applicant=body.applicant,
        project_side=body.project_side,
        requirements=body.requirements,
        artifact_url=body.artifact_url,
        document_url=body.document_url,
        status=OutboundStatus.PENDING,
    )
    return wb.outbound_requests.upsert(request).to_dict()


@router.post("/{request_id}/approve")
async def approve_outbound(request_id: str, wb: Workbench = Depends(get_workbench)):
    return _decide(wb, request_id, OutboundStatus.APPROVED).to_dict()


@router.post("/{request_id}/reject")
async def reject_outbound(request_id: str, wb: Workbench = Depends(get_workbench)):
    return _decide(wb, request_id, OutboundStatus.REJECTED).to_dict()


@router.delete("/{request_id}")
async def delete_outbound(
    request_id: str,
    confirm: bool = False,
    wb: Workbench = Depends(get_workbench),
):
    require_confirmation(confirm, "outbound request")
    deleted = wb.outbound_requests.delete(request_id)
    return {"status": "deleted" if deleted else "absent", "id": request_id, "deleted": deleted}
