"""Persistence boundary: generic record CRUD keyed by an opaque id."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

Record = Dict[str, Any]

# Table names used by the project service
PROJECTS = "projects"
CHARTERS = "charters"
MILESTONES = "milestones"
TASKS = "tasks"
RISKS = "risks"
STAKEHOLDERS = "stakeholders"
ESCALATIONS = "escalations"
UPDATES = "updates"


class RecordNotFoundError(LookupError):
    """No record with the given id exists in the table."""

    def __init__(self, table: str, record_id: str):
        super().__init__(f"{table} record not found: {record_id}")
        self.table = table
        self.record_id = record_id


class RecordStore(ABC):
    """Abstract relational store.

    Records are plain dicts. ``insert`` assigns ``id``, ``created_at`` and
    ``updated_at``; callers treat the id as opaque.
    """

    @abstractmethod
    def insert(self, table: str, record: Record) -> Record:
        """Insert one record and return it as stored."""
        pass

    def insert_many(self, table: str, records: Iterable[Record]) -> List[Record]:
        """Insert several records, returning them as stored."""
        return [self.insert(table, r) for r in records]

    @abstractmethod
    def get(self, table: str, record_id: str) -> Optional[Record]:
        """Fetch one record by id, or None."""
        pass

    @abstractmethod
    def update(self, table: str, record_id: str, changes: Record) -> Record:
        """Apply ``changes`` to a record and return the result.

        Raises:
            RecordNotFoundError: If the record does not exist
        """
        pass

    @abstractmethod
    def delete(self, table: str, record_id: str) -> None:
        """Delete a record.

        Raises:
            RecordNotFoundError: If the record does not exist
        """
        pass

    @abstractmethod
    def query(
        self,
        table: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[Record]:
        """Records whose fields equal every keyword filter, optionally ordered and limited."""
        pass
