"""Orchestrator module: the project lifecycle service."""

from .project_service import (
    ProjectService,
    ProjectNotFoundError,
    ALLOWED_TASK_FIELDS,
)

__all__ = [
    "ProjectService",
    "ProjectNotFoundError",
    "ALLOWED_TASK_FIELDS",
]
