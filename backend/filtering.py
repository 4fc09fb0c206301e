# filtering.py - Search & filter projections
# Pure, order-preserving views over record collections. Inputs are never mutated.

from dataclasses import replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from models import (
    DocumentCategory, DocumentRecord, NavGroup, OutboundRequestRecord,
    ProductRecord, TicketRecord, VersionRecord,
)

# Sentinel meaning "no filtering on this axis"
ALL = "ALL"

VERSION_SEARCH_FIELDS = ("product_name", "version")
TICKET_SEARCH_FIELDS = ("title", "id", "customer_name", "description")
DOCUMENT_SEARCH_FIELDS = ("title",)
OUTBOUND_SEARCH_FIELDS = ("project_side", "applicant", "product_name")
PRODUCT_SEARCH_FIELDS = ("name", "description", "owner")
NAV_ITEM_SEARCH_FIELDS = ("name", "description")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value).lower()


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def matches_query(record: Any, query: Optional[str], fields: Sequence[str]) -> bool:
    """Case-insensitive substring match against any of ``fields``; empty query matches all."""
    if not query:
        return True
    needle = query.lower()
    return any(needle in _text(getattr(record, name, None)) for name in fields)


def matches_value(actual: Any, wanted: Any) -> bool:
    if wanted is None or wanted == ALL:
        return True
    return _plain(actual) == _plain(wanted)


def filter_records(
    records: Iterable[Any],
    query: Optional[str] = None,
    fields: Sequence[str] = (),
    **categorical: Any,
) -> List[Any]:
    """Generic projection: query over ``fields`` AND every ``attribute=value`` filter."""
    return [
        r for r in records
        if matches_query(r, query, fields)
        and all(matches_value(getattr(r, name, None), wanted) for name, wanted in categorical.items())
    ]


def filter_versions(
    versions: Iterable[VersionRecord],
    query: Optional[str] = None,
    show_archived: bool = False,
) -> List[VersionRecord]:
    return [
        v for v in versions
        if (show_archived or not v.is_archived)
        and matches_query(v, query, VERSION_SEARCH_FIELDS)
    ]


def filter_tickets(
    tickets: Iterable[TicketRecord],
    query: Optional[str] = None,
    status: Any = ALL,
    priority: Any = ALL,
    product_id: Optional[str] = ALL,
) -> List[TicketRecord]:
    return filter_records(
        tickets, query, TICKET_SEARCH_FIELDS,
        status=status, priority=priority, product_id=product_id,
    )


def filter_documents(
    documents: Iterable[DocumentRecord],
    version_id: Optional[str] = ALL,
    query: Optional[str] = None,
    category: Any = ALL,
) -> List[DocumentRecord]:
    return filter_records(
        documents, query, DOCUMENT_SEARCH_FIELDS,
        version_id=version_id, category=category,
    )


def group_documents_by_category(documents: Iterable[DocumentRecord]) -> Dict[DocumentCategory, List[DocumentRecord]]:
    """Bucket documents per category, buckets in enum order (empty ones kept)."""
    groups: Dict[DocumentCategory, List[DocumentRecord]] = {c: [] for c in DocumentCategory}
    for doc in documents:
        groups[doc.category].append(doc)
    return groups


def filter_outbound(
    requests: Iterable[OutboundRequestRecord],
    query: Optional[str] = None,
    status: Any = ALL,
) -> List[OutboundRequestRecord]:
    return filter_records(requests, query, OUTBOUND_SEARCH_FIELDS, status=status)


def filter_products(products: Iterable[ProductRecord], query: Optional[str] = None) -> List[ProductRecord]:
    return filter_records(products, query, PRODUCT_SEARCH_FIELDS)


def filter_nav_groups(groups: Iterable[NavGroup], query: Optional[str] = None) -> List[NavGroup]:
    """Two-level portal search.

    A group whose title matches is kept with all of its items. Otherwise it
    is kept with only the items whose name or description matches, and it is
    dropped when none do.
    """
    groups = list(groups)
    if not query:
        return groups

    result = []
    for group in groups:
        if matches_query(group, query, ("title",)):
            result.append(group)
            continue
        matching = [item for item in group.items if matches_query(item, query, NAV_ITEM_SEARCH_FIELDS)]
        if matching:
            result.append(replace(group, items=matching))
    return result
