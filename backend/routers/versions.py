"""
Versions Router - Version registry and roadmap timeline
Filtered, paginated version rows with their bar on the rolling
display window, the roadmap view, and version upsert/delete.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field, field_validator

from filtering import filter_versions
from models import VersionRecord, VersionStatus, VersionType, new_id
from routers.common import not_found, page_payload, require_confirmation, select_page
from timeline import ROADMAP_ROW_LIMIT, DisplayWindow, project_version, project_versions
from workbench import Workbench, get_workbench

router = APIRouter(prefix="/api/v1/versions", tags=["Versions"])


# ── Schemas ──────────────────────────────────────────────────

class VersionPayload(BaseModel):
    product_name: str = Field(..., min_length=1, max_length=200)
    version: str = Field(..., min_length=1, max_length=100)
    name: str = ""
    type: VersionType = VersionType.STANDARD
    features: str = ""
    dependencies: Optional[str] = None
    status: VersionStatus = VersionStatus.PLANNING
    progress: int = 0
    customers: List[str] = []
    env_requirements: Optional[str] = None
    start_date: Optional[str] = None
    end_date: str = ""
    planned_uat_date: str = ""
    actual_uat_date: Optional[str] = None
    delivery_date: Optional[str] = None
    product_manager: str = ""
    version_admin: str = ""
    uat_deployer: Optional[str] = None
    uat_tester: Optional[str] = None
    notify_user: Optional[str] = None
    uat_finish_user: Optional[str] = None
    is_ready_for_delivery: bool = False
    is_archived: bool = False
    is_delayed: bool = False
    related_release_version: Optional[str] = None
    related_outbound_request: Optional[str] = None
    exception_note: Optional[str] = None

    @field_validator("product_name", "version")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


def _row(version: VersionRecord, window: DisplayWindow) -> dict:
    bar = project_version(window, version)
    row = version.to_dict()
    row["bar"] = bar.to_dict() if bar else None
    return row


def _to_record(wb: Workbench, version_id: str, body: VersionPayload) -> VersionRecord:
    data = body.model_dump()
    data["start_date"] = data["start_date"] or wb.today().isoformat()
    return VersionRecord(id=version_id, **data)


# ── Lists ────────────────────────────────────────────────────

@router.get("")
async def list_versions(
    search: Optional[str] = None,
    show_archived: bool = False,
    page: Optional[int] = Query(None, ge=1),
    wb: Workbench = Depends(get_workbench),
):
    view = wb.list_view("versions")
    changed = view.update(search, show_archived=show_archived)
    versions = filter_versions(wb.versions, view.query, show_archived)
    window = DisplayWindow.rolling(wb.today())

    result = select_page(view, versions, page, changed)
    payload = page_payload(result, view, lambda v: _row(v, window))
    payload["window"] = window.to_dict()
    return payload


@router.get("/roadmap")
async def roadmap(
    search: Optional[str] = None,
    show_archived: bool = False,
    wb: Workbench = Depends(get_workbench),
):
    """Gantt view: the rolling window and the first rows of the filtered list."""
    window = DisplayWindow.rolling(wb.today())
    versions = filter_versions(wb.versions, search, show_archived)
    rows = project_versions(versions, window, limit=ROADMAP_ROW_LIMIT)
    return {
        "window": window.to_dict(),
        "total": len(versions),
        "limit": ROADMAP_ROW_LIMIT,
        "rows": [
            {"version": v.to_dict(), "bar": bar.to_dict() if bar else None}
            for v, bar in rows
        ],
    }


@router.get("/statuses")
async def list_statuses():
    return {
        "statuses": [s.value for s in VersionStatus],
        "types": [t.value for t in VersionType],
    }


# ── CRUD ─────────────────────────────────────────────────────

@router.get("/{version_id}")
async def get_version(version_id: str, wb: Workbench = Depends(get_workbench)):
    version = wb.versions.get(version_id)
    if not version:
        raise not_found("Version")
    return _row(version, DisplayWindow.rolling(wb.today()))


@router.post("", status_code=201)
async def create_version(body: VersionPayload, wb: Workbench = Depends(get_workbench)):
    version = wb.versions.upsert(_to_record(wb, new_id("v"), body))
    return version.to_dict()


@router.put("/{version_id}")
async def upsert_version(
    version_id: str,
    body: VersionPayload,
    response: Response,
    wb: Workbench = Depends(get_workbench),
):
    created = version_id not in wb.versions
    version = wb.versions.upsert(_to_record(wb, version_id, body))
    if created:
        response.status_code = 201
    return version.to_dict()


@router.delete("/{version_id}")
async def delete_version(
    version_id: str,
    confirm: bool = False,
    wb: Workbench = Depends(get_workbench),
):
    # Documents and outbound requests that reference the version are left alone
    require_confirmation(confirm, "version")
    deleted = wb.versions.delete(version_id)
    return {"status": "deleted" if deleted else "absent", "id": version_id, "deleted": deleted}
