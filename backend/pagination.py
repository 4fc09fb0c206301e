# pagination.py - Fixed-size pages and per-module list view state

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

PAGE_SIZE = 10


class PageOutOfRange(ValueError):
    def __init__(self, page: int, total_pages: int):
        self.page = page
        self.total_pages = total_pages
        super().__init__(f"Page {page} is out of range (1..{max(total_pages, 1)})")


def total_pages(total: int, page_size: int = PAGE_SIZE) -> int:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return math.ceil(total / page_size) if total else 0


@dataclass
class Page:
    items: List[Any]
    page: int
    page_size: int
    total: int
    total_pages: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self, serialise: Optional[Callable[[Any], Any]] = None) -> Dict[str, Any]:
        serialise = serialise or (lambda item: item.to_dict())
        return {
            "total": self.total,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "has_prev": self.has_prev,
            "has_next": self.has_next,
            "items": [serialise(item) for item in self.items],
        }


def paginate(items: Sequence[Any], page: int = 1, page_size: int = PAGE_SIZE) -> Page:
    """Slice ``items`` to the 1-indexed ``page``.

    An empty collection has zero pages but page 1 is still served (empty).
    Any other page outside 1..total_pages raises PageOutOfRange.
    """
    items = list(items)
    pages = total_pages(len(items), page_size)
    if page < 1 or page > max(pages, 1):
        raise PageOutOfRange(page, pages)
    start = (page - 1) * page_size
    return Page(
        items=items[start:start + page_size],
        page=page,
        page_size=page_size,
        total=len(items),
        total_pages=pages,
    )


@dataclass
class ListView:
    """Query, categorical filters and current page of one list screen.

    Changing the query or any filter value sends the view back to page 1.
    """
    page_size: int = PAGE_SIZE
    query: str = ""
    filters: Dict[str, Any] = field(default_factory=dict)
    page: int = 1

    def set_query(self, query: Optional[str]) -> bool:
        query = query or ""
        if query == self.query:
            return False
        self.query = query
        self.page = 1
        return True

    def set_filter(self, name: str, value: Any) -> bool:
        # First value seen for a filter registers it; only later edits reset
        if name not in self.filters:
            self.filters[name] = value
            return False
        if self.filters[name] == value:
            return False
        self.filters[name] = value
        self.page = 1
        return True

    def update(self, query: Optional[str] = None, **filters: Any) -> bool:
        """Apply a full set of inputs; True when anything changed (page reset)."""
        changed = self.set_query(query)
        for name, value in filters.items():
            changed = self.set_filter(name, value) or changed
        return changed

    def go_to(self, page: int, total: int) -> int:
        pages = total_pages(total, self.page_size)
        self.page = max(1, min(page, max(pages, 1)))
        return self.page

    def next_page(self, total: int) -> int:
        return self.go_to(self.page + 1, total)

    def prev_page(self, total: int) -> int:
        return self.go_to(self.page - 1, total)

    def window(self, items: Sequence[Any]) -> Page:
        """Current page of ``items``, pulled back into range if the collection shrank."""
        items = list(items)
        self.go_to(self.page, len(items))
        return paginate(items, self.page, self.page_size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "filters": {k: getattr(v, "value", v) for k, v in self.filters.items()},
            "page": self.page,
            "page_size": self.page_size,
        }
