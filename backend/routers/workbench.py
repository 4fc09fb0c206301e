"""
Workbench Router - Current screen, available screens and current user
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from models import ViewState
from workbench import LIST_VIEWS, Workbench, get_workbench

router = APIRouter(prefix="/api/v1/workbench", tags=["Workbench"])


class ViewChange(BaseModel):
    view: ViewState


@router.get("/view")
async def get_view(wb: Workbench = Depends(get_workbench)):
    return {"view": wb.view.value}


@router.put("/view")
async def set_view(body: ViewChange, wb: Workbench = Depends(get_workbench)):
    previous = wb.view
    wb.set_view(body.view)
    return {"view": wb.view.value, "previous": previous.value}


@router.get("/views")
async def list_views(wb: Workbench = Depends(get_workbench)):
    return {
        "views": [v.value for v in ViewState],
        "current": wb.view.value,
        "list_state": {name: wb.list_view(name).to_dict() for name in LIST_VIEWS},
    }


@router.get("/me")
async def current_user(wb: Workbench = Depends(get_workbench)):
    return wb.user.to_dict()
