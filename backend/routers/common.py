# routers/common.py - Helpers shared by the workbench routers
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Type

from fastapi import HTTPException

from filtering import ALL
from pagination import ListView, Page, PageOutOfRange, paginate


def require_confirmation(confirm: bool, entity: str) -> None:
    """Destructive actions need ``confirm=true``; without it nothing changes."""
    if not confirm:
        raise HTTPException(409, {
            "code": "confirmation_required",
            "message": f"Deleting this {entity} requires confirm=true",
        })


def not_found(entity: str) -> HTTPException:
    return HTTPException(404, f"{entity} not found")


def is_all(value: Optional[str]) -> bool:
    """Absent, empty or any-case ``all`` selects every record."""
    return value is None or not value.strip() or value.strip().upper() == ALL


def id_filter(value: Optional[str]) -> str:
    """Record-id query parameter, normalised the same way as categorical ones."""
    return ALL if is_all(value) else value.strip()


def enum_filter(value: Optional[str], enum_cls: Type[Enum], name: str) -> Any:
    """Categorical query parameter: ALL (or absent) means no filtering."""
    if is_all(value):
        return ALL
    value = value.strip()
    try:
        return enum_cls(value.upper())
    except ValueError:
        raise HTTPException(400, f"Invalid {name}. Valid: {[e.value for e in enum_cls]} or {ALL}")


def select_page(view: ListView, items: Sequence[Any], page: Optional[int], changed: bool) -> Page:
    """Page for a list request.

    When the filter inputs changed the view is back on page 1 and an
    explicit ``page`` is ignored. Otherwise an explicit page must exist.
    """
    if page is None or changed:
        return view.window(items)
    try:
        result = paginate(items, page, view.page_size)
    except PageOutOfRange as e:
        raise HTTPException(400, str(e))
    view.page = result.page
    return result


def page_payload(page: Page, view: ListView, serialise: Optional[Callable[[Any], Dict[str, Any]]] = None) -> Dict[str, Any]:
    payload = page.to_dict(serialise)
    payload["view"] = view.to_dict()
    return payload
