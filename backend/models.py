# models.py - Record types for the product workbench
# - String enums shared by records and request schemas
# - Dataclass records keyed by a string id
# - to_dict()/from_dict() for the JSON surface
# - Percent fields clamped to [0, 100] whenever a record is built

import time
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Any, Dict, List, Optional


def utcnow():
    return datetime.now(timezone.utc)


_last_stamp = 0


def new_id(prefix: str) -> str:
    """Wall-clock id (``prefix`` + epoch millis), bumped when two land in the same millisecond."""
    global _last_stamp
    stamp = int(time.time() * 1000)
    if stamp <= _last_stamp:
        stamp = _last_stamp + 1
    _last_stamp = stamp
    return f"{prefix}{stamp}"


def clamp_percent(value: Any) -> int:
    value = int(value or 0)
    return max(0, min(100, value))


# ============================================================
# ENUMS
# ============================================================

class TicketStatus(str, PyEnum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class TicketPriority(str, PyEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class UserRole(str, PyEnum):
    ADMIN = "ADMIN"
    AGENT = "AGENT"
    USER = "USER"


class Sentiment(str, PyEnum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


class VersionStatus(str, PyEnum):
    PLANNING = "PLANNING"
    DEVELOPING = "DEVELOPING"
    UAT_READY = "UAT_READY"
    UAT_VERIFYING = "UAT_VERIFYING"
    RELEASED = "RELEASED"
    DELIVERED = "DELIVERED"
    ARCHIVED = "ARCHIVED"


class VersionType(str, PyEnum):
    STANDARD = "STANDARD"
    CUSTOMIZED = "CUSTOMIZED"
    HOTFIX = "HOTFIX"


class DocumentCategory(str, PyEnum):
    MARKET = "MARKET"
    DELIVERY = "DELIVERY"
    OPS = "OPS"
    RND = "RND"


class OutboundStatus(str, PyEnum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReleaseType(str, PyEnum):
    HOTFIX = "Hotfix"
    FEATURE = "Feature"
    OPTIMIZATION = "Optimization"


class ViewState(str, PyEnum):
    PORTAL = "PORTAL"
    DASHBOARD = "DASHBOARD"
    ROADMAP = "ROADMAP"
    TICKETS = "TICKETS"
    PRODUCTS = "PRODUCTS"
    DOCUMENTS = "DOCUMENTS"
    OUTBOUND = "OUTBOUND"
    SETTINGS = "SETTINGS"


# ============================================================
# RECORD BASE
# ============================================================

def _plain(value: Any) -> Any:
    if isinstance(value, PyEnum):
        return value.value
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class Record:
    """Shared JSON shape for the dataclass records below."""

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


# ============================================================
# RECORDS
# ============================================================

@dataclass
class User(Record):
    id: str
    name: str
    avatar: str = ""
    role: UserRole = UserRole.AGENT

    def __post_init__(self):
        self.role = UserRole(self.role)


@dataclass
class AnalysisResult(Record):
    suggested_priority: TicketPriority
    suggested_type: str
    summary: str
    root_cause_hypothesis: str
    sentiment: Sentiment
    draft_response: str
    suggested_root_cause_category: Optional[str] = None

    def __post_init__(self):
        self.suggested_priority = TicketPriority(self.suggested_priority)
        self.sentiment = Sentiment(self.sentiment)


@dataclass
class TicketRecord(Record):
    id: str
    title: str
    description: str = ""
    status: TicketStatus = TicketStatus.OPEN
    priority: TicketPriority = TicketPriority.MEDIUM
    type: str = ""
    customer_name: str = ""
    reporter_id: str = ""
    assignee_id: Optional[str] = None
    test_owner: Optional[str] = None
    dev_owner: Optional[str] = None
    product_id: str = ""
    product_version: str = ""
    target_version: Optional[str] = None
    root_cause_category: Optional[str] = None
    introduction_stage: Optional[str] = None
    solution: Optional[str] = None
    estimated_resolution_time: Optional[str] = None
    review_status: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    reporting_month: Optional[str] = None
    attachment_url: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    ai_analysis: Optional[AnalysisResult] = None

    def __post_init__(self):
        self.status = TicketStatus(self.status)
        self.priority = TicketPriority(self.priority)
        if isinstance(self.ai_analysis, dict):
            self.ai_analysis = AnalysisResult.from_dict(self.ai_analysis)
        self.tags = list(self.tags or [])


@dataclass
class ProductRecord(Record):
    id: str
    name: str
    description: str = ""
    owner: str = ""
    health: int = 100
    active_tickets: int = 0
    icon: str = "Package"

    def __post_init__(self):
        self.health = clamp_percent(self.health)
        self.active_tickets = max(0, int(self.active_tickets or 0))


@dataclass
class VersionRecord(Record):
    id: str
    product_name: str
    version: str
    name: str = ""
    type: VersionType = VersionType.STANDARD
    features: str = ""
    dependencies: Optional[str] = None
    status: VersionStatus = VersionStatus.PLANNING
    progress: int = 0
    customers: List[str] = field(default_factory=list)
    env_requirements: Optional[str] = None
    start_date: str = ""
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

    def __post_init__(self):
        self.type = VersionType(self.type)
        self.status = VersionStatus(self.status)
        self.progress = clamp_percent(self.progress)
        self.customers = list(self.customers or [])


@dataclass
class ReleaseRecord(Record):
    id: str
    version: str
    date: str
    type: ReleaseType
    title: str
    description: str = ""
    items: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.type = ReleaseType(self.type)


@dataclass
class DocumentRecord(Record):
    id: str
    title: str
    category: DocumentCategory
    version_id: str
    updated_at: str = ""
    author: str = ""
    url: str = "#"

    def __post_init__(self):
        self.category = DocumentCategory(self.category)


@dataclass
class OutboundRequestRecord(Record):
    id: str
    application_date: str
    product_id: str
    product_name: str
    version_id: str
    version: str
    applicant: str
    project_side: str
    requirements: Optional[str] = None
    artifact_url: Optional[str] = None
    document_url: Optional[str] = None
    status: OutboundStatus = OutboundStatus.PENDING
    operator: Optional[str] = None
    operation_time: Optional[str] = None

    def __post_init__(self):
        self.status = OutboundStatus(self.status)


@dataclass
class NavResource(Record):
    id: str
    name: str
    description: str = ""
    url: str = "https://"
    icon: str = "Globe"
    bg_color: Optional[str] = "bg-slate-100 text-slate-600"


@dataclass
class NavGroup(Record):
    id: str
    title: str
    items: List[NavResource] = field(default_factory=list)

    def __post_init__(self):
        self.items = [
            NavResource.from_dict(item) if isinstance(item, dict) else item
            for item in (self.items or [])
        ]
