"""Pure scoring functions: project health and scale."""

from .health_scorer import calculate_health_score, count_overdue_tasks
from .scale_classifier import determine_project_scale

__all__ = [
    "calculate_health_score",
    "count_overdue_tasks",
    "determine_project_scale",
]
