"""
Portal Navigation Router - Grouped resource links on the portal page
Group search matches a group title (whole group) or item name/description
(only the matching items).
"""

from dataclasses import replace
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field, field_validator

from filtering import filter_nav_groups
from models import NavGroup, NavResource, new_id
from routers.common import not_found, require_confirmation
from workbench import Workbench, get_workbench

router = APIRouter(prefix="/api/v1/nav", tags=["Portal Navigation"])


# ── Schemas ──────────────────────────────────────────────────

class NavResourcePayload(BaseModel):
    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    url: str = "https://"
    icon: str = "Globe"
    bg_color: Optional[str] = "bg-slate-100 text-slate-600"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class NavGroupPayload(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    items: Optional[List[NavResourcePayload]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


def _resources(items: List[NavResourcePayload]) -> List[NavResource]:
    # Ids sent back by the client are kept; new rows get a fresh one
    return [
        NavResource(id=item.id or new_id("r"), **item.model_dump(exclude={"id"}))
        for item in items
    ]


# ── Groups ───────────────────────────────────────────────────

@router.get("/groups")
async def list_groups(search: Optional[str] = None, wb: Workbench = Depends(get_workbench)):
    view = wb.list_view("nav")
    view.update(search)
    groups = filter_nav_groups(wb.nav_groups, view.query)
    return {
        "total_groups": len(groups),
        "total_items": sum(len(g.items) for g in groups),
        "groups": [g.to_dict() for g in groups],
        "view": view.to_dict(),
    }


@router.get("/groups/{group_id}")
async def get_group(group_id: str, wb: Workbench = Depends(get_workbench)):
    group = wb.nav_groups.get(group_id)
    if not group:
        raise not_found("Group")
    return group.to_dict()


@router.post("/groups", status_code=201)
async def create_group(body: NavGroupPayload, wb: Workbench = Depends(get_workbench)):
    group = NavGroup(id=new_id("g"), title=body.title, items=_resources(body.items or []))
    return wb.nav_groups.upsert(group).to_dict()


@router.put("/groups/{group_id}")
async def upsert_group(
    group_id: str,
    body: NavGroupPayload,
    response: Response,
    wb: Workbench = Depends(get_workbench),
):
    """Rename a group; items are replaced only when the body carries them."""
    existing = wb.nav_groups.get(group_id)
    if existing is None:
        group = NavGroup(id=group_id, title=body.title, items=_resources(body.items or []))
        response.status_code = 201
    elif body.items is None:
        group = replace(existing, title=body.title)
    else:
        group = replace(existing, title=body.title, items=_resources(body.items))
    return wb.nav_groups.upsert(group).to_dict()


@router.delete("/groups/{group_id}")
async def delete_group(
    group_id: str,
    confirm: bool = False,
    wb: Workbench = Depends(get_workbench),
):
    require_confirmation(confirm, "group")
    deleted = wb.nav_groups.delete(group_id)
    return {"status": "deleted" if deleted else "absent", "id": group_id, "deleted": deleted}


# ── Items ────────────────────────────────────────────────────

@router.post("/groups/{group_id}/items", status_code=201)
async def add_item(group_id: str, body: NavResourcePayload, wb: Workbench = Depends(get_workbench)):
    item = NavResource(id=new_id("r"), **body.model_dump(exclude={"id"}))
    group = wb.nav_groups.upsert_item(group_id, item)
    if group is None:
        raise not_found("Group")
    return {"group_id": group_id, "item": item.to_dict()}


@router.put("/groups/{group_id}/items/{item_id}")
async def upsert_item(
    group_id: str,
    item_id: str,
    body: NavResourcePayload,
    response: Response,
    wb: Workbench = Depends(get_workbench),
):
    created = wb.nav_groups.find_item(group_id, item_id) is None
    item = NavResource(id=item_id, **body.model_dump(exclude={"id"}))
    if wb.nav_groups.upsert_item(group_id, item) is None:
        raise not_found("Group")
    if created:
        response.status_code = 201
    return {"group_id": group_id, "item": item.to_dict()}


@router.delete("/groups/{group_id}/items/{item_id}")
async def delete_item(
    group_id: str,
    item_id: str,
    confirm: bool = False,
    wb: Workbench = Depends(get_workbench),
):
    require_confirmation(confirm, "resource")
    if group_id not in wb.nav_groups:
        raise not_found("Group")
    deleted = wb.nav_groups.delete_item(group_id, item_id)
    return {"status": "deleted" if deleted else "absent", "id": item_id, "deleted": deleted}
