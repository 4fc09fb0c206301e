"""
Document Library Router - Per-version document catalogue
Documents are browsed per version (or across ALL), filtered by title and
category, and returned bucketed into the fixed category order.
"""

from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field, field_validator

from filtering import ALL, filter_documents, group_documents_by_category
from models import DocumentCategory, DocumentRecord, new_id
from routers.common import enum_filter, id_filter, not_found, require_confirmation
from workbench import Workbench, get_workbench

router = APIRouter(prefix="/api/v1/documents", tags=["Documents"])


# ── Schemas ──────────────────────────────────────────────────

class DocumentPayload(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    category: DocumentCategory
    version_id: str = Field(..., min_length=1)
    author: Optional[str] = None
    url: str = "#"
    updated_at: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


class DocumentUrlUpdate(BaseModel):
    url: str = Field(..., min_length=1)


def _to_record(wb: Workbench, doc_id: str, body: DocumentPayload) -> DocumentRecord:
    return DocumentRecord(
        id=doc_id,
        title=body.title,
        category=body.category,
        version_id=body.version_id,
        author=body.author or wb.user.name,
        url=body.url,
        updated_at=body.updated_at or wb.today().isoformat(),
    )


def _default_version(wb: Workbench) -> str:
    """Last chosen version selector, else the first known version."""
    stored = wb.list_view("documents").filters.get("version_id")
    if stored:
        return stored
    ids = wb.versions.ids()
    return ids[0] if ids else ALL


# ── Library ──────────────────────────────────────────────────

@router.get("")
async def list_documents(
    version_id: Optional[str] = None,
    search: Optional[str] = None,
    category: Optional[str] = None,
    wb: Workbench = Depends(get_workbench),
):
    category_f = enum_filter(category, DocumentCategory, "category")
    # No selector keeps the remembered version; "all" in any case spans every version
    version_f = id_filter(version_id) if version_id else _default_version(wb)

    view = wb.list_view("documents")
    view.update(search, version_id=version_f, category=category_f)
    documents = filter_documents(wb.documents, version_f, view.query, category_f)
    groups = group_documents_by_category(documents)

    version = wb.versions.get(version_f) if version_f != ALL else None
    return {
        "version_id": version_f,
        "version": version.to_dict() if version else None,
        "total": len(documents),
        "groups": [
            {"category": cat.value, "count": len(docs), "items": [d.to_dict() for d in docs]}
            for cat, docs in groups.items()
        ],
        "view": view.to_dict(),
    }


@router.get("/categories")
async def list_categories():
    return {"categories": [c.value for c in DocumentCategory]}


# ── CRUD ─────────────────────────────────────────────────────

@router.get("/{doc_id}")
async def get_document(doc_id: str, wb: Workbench = Depends(get_workbench)):
    doc = wb.documents.get(doc_id)
    if not doc:
        raise not_found("Document")
    return doc.to_dict()


@router.post("", status_code=201)
async def create_document(body: DocumentPayload, wb: Workbench = Depends(get_workbench)):
    doc = wb.documents.upsert(_to_record(wb, new_id("d"), body))
    return doc.to_dict()


@router.put("/{doc_id}")
async def upsert_document(
    doc_id: str,
    body: DocumentPayload,
    response: Response,
    wb: Workbench = Depends(get_workbench),
):
    created = doc_id not in wb.documents
    doc = wb.documents.upsert(_to_record(wb, doc_id, body))
    if created:
        response.status_code = 201
    return doc.to_dict()


@router.patch("/{doc_id}/url")
async def update_document_url(
    doc_id: str,
    body: DocumentUrlUpdate,
    wb: Workbench = Depends(get_workbench),
):
    doc = wb.documents.get(doc_id)
    if not doc:
        raise not_found("Document")
    doc = wb.documents.upsert(replace(doc, url=body.url, updated_at=wb.today().isoformat()))
    return doc.to_dict()


@router.delete("/{doc_id}")
async def delete_document(
    doc_id: str,
    confirm: bool = False,
    wb: Workbench = Depends(get_workbench),
):
    require_confirmation(confirm, "document")
    deleted = wb.documents.delete(doc_id)
    return {"status": "deleted" if deleted else "absent", "id": doc_id, "deleted": deleted}
