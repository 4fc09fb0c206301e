"""
Product Workbench - In-memory Record Stores
Ordered, id-keyed collections with upsert/delete reconciliation.
Every mutation builds a new sequence and swaps it in whole, so a caller
holding the previous snapshot never sees a half-applied change.
"""

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from models import NavGroup, NavResource

logger = logging.getLogger("workbench.store")

T = TypeVar("T")


class InsertPosition(str, Enum):
    """Where a record with a new id lands"""
    APPEND = "append"
    PREPEND = "prepend"


class RecordStore(Generic[T]):
    """One entity type's collection, owned by the workbench"""

    def __init__(
        self,
        name: str,
        records: Optional[Iterable[T]] = None,
        insert_position: InsertPosition = InsertPosition.APPEND,
    ):
        self.name = name
        self.insert_position = insert_position
        self._records: Tuple[T, ...] = tuple(records or ())
        self._hooks: Dict[str, List[Callable]] = {
            "after_upsert": [],
            "after_delete": [],
        }

    def register_hook(self, event: str, callback: Callable) -> None:
        """Register a hook for store events"""
        if event in self._hooks:
            self._hooks[event].append(callback)

    def _trigger_hooks(self, event: str, **kwargs) -> None:
        for callback in self._hooks.get(event, []):
            try:
                callback(**kwargs)
            except Exception:
                logger.exception(f"{self.name}: {event} hook failed")

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return -1

    # ── Reads ────────────────────────────────────────────────

    def get(self, record_id: str) -> Optional[T]:
        index = self._index_of(record_id)
        return self._records[index] if index >= 0 else None

    def all(self) -> List[T]:
        return list(self._records)

    def ids(self) -> List[str]:
        return [r.id for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[T]:
        return iter(self._records)

    def __contains__(self, record_id: object) -> bool:
        return self._index_of(record_id) >= 0

    # ── Writes ───────────────────────────────────────────────

    def replace_all(self, records: Iterable[T]) -> None:
        self._records = tuple(records)

    def upsert(self, record: T) -> T:
        """Replace the record with the same id in place, or insert it at ``insert_position``."""
        records = list(self._records)
        index = self._index_of(record.id)
        created = index < 0
        if not created:
            records[index] = record
        elif self.insert_position == InsertPosition.PREPEND:
            records.insert(0, record)
        else:
            records.append(record)
        self._records = tuple(records)

        logger.debug(f"{self.name}: {'created' if created else 'updated'} {record.id}")
        self._trigger_hooks("after_upsert", record=record, created=created)
        return record

    def delete(self, record_id: str) -> bool:
        """Remove the record with ``record_id``; unknown ids are a no-op (False)."""
        removed = self.get(record_id)
        if removed is None:
            return False
        self._records = tuple(r for r in self._records if r.id != record_id)

        logger.debug(f"{self.name}: deleted {record_id}")
        self._trigger_hooks("after_delete", record_id=record_id, record=removed)
        return True


class Selection(Generic[T]):
    """The record currently open in a detail view.

    Bound to a store, it follows upserts of the same id and clears itself
    when that record is deleted.
    """

    def __init__(self):
        self.current: Optional[T] = None

    @property
    def record_id(self) -> Optional[str]:
        return self.current.id if self.current is not None else None

    def select(self, record: T) -> T:
        self.current = record
        return record

    def clear(self) -> None:
        self.current = None

    def refresh(self, record: T, **_: Any) -> None:
        if self.current is not None and self.current.id == record.id:
            self.current = record

    def forget(self, record_id: str, **_: Any) -> None:
        if self.record_id == record_id:
            self.current = None

    def bind(self, store: RecordStore) -> "Selection":
        store.register_hook("after_upsert", self.refresh)
        store.register_hook("after_delete", self.forget)
        return self


class NavGroupStore(RecordStore[NavGroup]):
    """Portal groups, with the same upsert/delete rules applied to items inside a group"""

    def find_item(self, group_id: str, item_id: str) -> Optional[NavResource]:
        group = self.get(group_id)
        if group is None:
            return None
        return next((i for i in group.items if i.id == item_id), None)

    def upsert_item(self, group_id: str, item: NavResource) -> Optional[NavGroup]:
        """Replace/append ``item`` inside a group; None when the group does not exist."""
        group = self.get(group_id)
        if group is None:
            return None
        items = list(group.items)
        index = next((n for n, i in enumerate(items) if i.id == item.id), -1)
        if index >= 0:
            items[index] = item
        else:
            items.append(item)
        return self.upsert(replace(group, items=items))

    def delete_item(self, group_id: str, item_id: str) -> bool:
        group = self.get(group_id)
        if group is None or not any(i.id == item_id for i in group.items):
            return False
        self.upsert(replace(group, items=[i for i in group.items if i.id != item_id]))
        return True
