"""
Dashboard Router - Overview cards, fixed-window timeline and release feed
"""

from fastapi import APIRouter, Depends

from models import TicketPriority, VersionStatus
from timeline import DisplayWindow, project_versions
from workbench import Workbench, get_workbench

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])

RECENT_TICKETS = 3
RECENT_DOCUMENTS = 5


@router.get("")
async def dashboard(wb: Workbench = Depends(get_workbench)):
    versions = wb.versions.all()
    current = next((v for v in versions if v.status == VersionStatus.DEVELOPING), None)
    if current is None and versions:
        current = versions[0]

    window = DisplayWindow.dashboard()
    rows = project_versions(versions, window, limit=None)
    tickets = wb.tickets.all()

    return {
        "stats": {
            "critical_tickets": sum(1 for t in tickets if t.priority == TicketPriority.CRITICAL),
            "releases": len(wb.releases),
            "documents": len(wb.documents),
            "versions": len(versions),
        },
        "current_version": current.to_dict() if current else None,
        "timeline": {
            "window": window.to_dict(),
            "rows": [
                {"version": v.to_dict(), "bar": bar.to_dict() if bar else None}
                for v, bar in rows
            ],
        },
        "recent_tickets": [t.to_dict() for t in tickets[:RECENT_TICKETS]],
        "recent_documents": [d.to_dict() for d in wb.documents.all()[:RECENT_DOCUMENTS]],
        "releases": [r.to_dict() for r in wb.releases],
    }


@router.get("/releases")
async def list_releases(wb: Workbench = Depends(get_workbench)):
    return {"total": len(wb.releases), "releases": [r.to_dict() for r in wb.releases]}
