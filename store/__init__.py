"""Record persistence used by the project service."""

from .base import (
    Record,
    RecordStore,
    RecordNotFoundError,
    PROJECTS,
    CHARTERS,
    MILESTONES,
    TASKS,
    RISKS,
    STAKEHOLDERS,
    ESCALATIONS,
    UPDATES,
)
from .memory_store import InMemoryRecordStore

__all__ = [
    "Record",
    "RecordStore",
    "RecordNotFoundError",
    "InMemoryRecordStore",
    "PROJECTS",
    "CHARTERS",
    "MILESTONES",
    "TASKS",
    "RISKS",
    "STAKEHOLDERS",
    "ESCALATIONS",
    "UPDATES",
]
