# workbench.py - Application context
# Owns the record stores, the open-ticket selection, the current view,
# the current user and the list view state of every module.

import os
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from ai_assist import AnalysisCoordinator, TicketAnalyzer
from models import (
    DocumentRecord, NavGroup, OutboundRequestRecord, ProductRecord, ReleaseRecord,
    TicketRecord, User, UserRole, VersionRecord, ViewState, utcnow,
)
from pagination import ListView
from record_store import InsertPosition, NavGroupStore, RecordStore, Selection
import sample_data

logger = logging.getLogger("workbench")

LIST_VIEWS = ("tickets", "versions", "documents", "outbound", "products", "nav")


def default_user() -> User:
    """Current user from WORKBENCH_USER_* env vars, else the built-in agent."""
    user = sample_data.sample_user()
    role = os.getenv("WORKBENCH_USER_ROLE", user.role.value).upper()
    return User(
        id=os.getenv("WORKBENCH_USER_ID", user.id),
        name=os.getenv("WORKBENCH_USER_NAME", user.name),
        avatar=user.avatar,
        role=role if role in UserRole.__members__ else user.role,
    )


class Workbench:
    """All state of one console session"""

    def __init__(
        self,
        user: User,
        products: Iterable[ProductRecord] = (),
        tickets: Iterable[TicketRecord] = (),
        versions: Iterable[VersionRecord] = (),
        documents: Iterable[DocumentRecord] = (),
        outbound_requests: Iterable[OutboundRequestRecord] = (),
        nav_groups: Iterable[NavGroup] = (),
        releases: Iterable[ReleaseRecord] = (),
        analyzer: Any = None,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = utcnow,
    ):
        self.user = user
        self.view = ViewState.PORTAL
        self.today = today
        self.now = now

        self.products: RecordStore[ProductRecord] = RecordStore("products", products)
        self.tickets: RecordStore[TicketRecord] = RecordStore("tickets", tickets)
        self.versions: RecordStore[VersionRecord] = RecordStore("versions", versions)
        self.documents: RecordStore[DocumentRecord] = RecordStore("documents", documents)
        # Newest request first
        self.outbound_requests: RecordStore[OutboundRequestRecord] = RecordStore(
            "outbound_requests", outbound_requests, insert_position=InsertPosition.PREPEND,
        )
        self.nav_groups = NavGroupStore("nav_groups", nav_groups)
        self.releases: Tuple[ReleaseRecord, ...] = tuple(releases)

        self.selection: Selection[TicketRecord] = Selection().bind(self.tickets)
        self.list_views: Dict[str, ListView] = {name: ListView() for name in LIST_VIEWS}
        self.analysis = AnalysisCoordinator(self.tickets, analyzer or TicketAnalyzer())

    @classmethod
    def seeded(cls, analyzer: Any = None, user: Optional[User] = None, **kwargs) -> "Workbench":
        return cls(
            user=user or default_user(),
            products=sample_data.sample_products(),
            tickets=sample_data.sample_tickets(),
            versions=sample_data.sample_versions(),
            documents=sample_data.sample_documents(),
            outbound_requests=sample_data.sample_outbound_requests(),
            nav_groups=sample_data.sample_nav_groups(),
            releases=sample_data.sample_releases(),
            analyzer=analyzer,
            **kwargs,
        )

    def set_view(self, view: ViewState) -> ViewState:
        self.view = ViewState(view)
        return self.view

    def list_view(self, name: str) -> ListView:
        return self.list_views[name]

    def denormalize_outbound(self, product_id: str, version_id: str) -> Tuple[str, str]:
        """Display text cached on an outbound request at write time ("" for unknown ids)."""
        product = self.products.get(product_id)
        version = self.versions.get(version_id)
        return (product.name if product else "", version.version if version else "")

    def store_counts(self) -> Dict[str, int]:
        return {
            "products": len(self.products),
            "tickets": len(self.tickets),
            "versions": len(self.versions),
            "documents": len(self.documents),
            "outbound_requests": len(self.outbound_requests),
            "nav_groups": len(self.nav_groups),
            "releases": len(self.releases),
        }


# Module-level singleton
_workbench: Optional[Workbench] = None


def get_workbench() -> Workbench:
    """Process-wide workbench (FastAPI dependency; overridden in tests)."""
    global _workbench
    if _workbench is None:
        _workbench = Workbench.seeded()
        logger.info(f"Workbench seeded: {_workbench.store_counts()}")
    return _workbench


def reset_workbench() -> Workbench:
    global _workbench
    _workbench = None
    return get_workbench()
