"""In-memory RecordStore (useful for tests and the CLI)."""

import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .base import Record, RecordNotFoundError, RecordStore


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryRecordStore(RecordStore):
    """Dict-of-dicts store. Returns copies so callers cannot mutate stored rows."""

    def __init__(self) -> None:
        self.tables: Dict[str, Dict[str, Record]] = {}
        self._sequence = 0

    def _table(self, table: str) -> Dict[str, Record]:
        return self.tables.setdefault(table, {})

    def insert(self, table: str, record: Record) -> Record:
        now = _now_iso()
        self._sequence += 1
        stored = {
            "id": uuid.uuid4().hex,
            "created_at": now,
            "updated_at": now,
            **copy.deepcopy(record),
            "_seq": self._sequence,
        }
        self._table(table)[stored["id"]] = stored
        return self._public(stored)

    def get(self, table: str, record_id: str) -> Optional[Record]:
        stored = self._table(table).get(record_id)
        return self._public(stored) if stored is not None else None

    def update(self, table: str, record_id: str, changes: Record) -> Record:
        rows = self._table(table)
        if record_id not in rows:
            raise RecordNotFoundError(table, record_id)
        stored = rows[record_id]
        stored.update(copy.deepcopy({k: v for k, v in changes.items() if k not in ("id", "_seq")}))
        stored["updated_at"] = _now_iso()
        return self._public(stored)

    def delete(self, table: str, record_id: str) -> None:
        rows = self._table(table)
        if record_id not in rows:
            raise RecordNotFoundError(table, record_id)
        del rows[record_id]

    def query(
        self,
        table: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[Record]:
        rows = [
            r for r in self._table(table).values()
            if all(r.get(k) == v for k, v in filters.items())
        ]
        # Insertion order breaks ties so timestamps created in the same instant stay stable
        rows.sort(key=lambda r: r["_seq"], reverse=descending)
        if order_by is not None:
            present = [r for r in rows if r.get(order_by) is not None]
            present.sort(key=lambda r: r[order_by], reverse=descending)
            rows = present + [r for r in rows if r.get(order_by) is None]
        if limit is not None:
            rows = rows[:limit]
        return [self._public(r) for r in rows]

    @staticmethod
    def _public(stored: Record) -> Record:
        return {k: copy.deepcopy(v) for k, v in stored.items() if k != "_seq"}
