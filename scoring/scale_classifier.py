"""Project scale tiers by team size."""

from typing import Any, List, Tuple

from contracts import ProjectIntakeData, ProjectScale

DEFAULT_TEAM_SIZE = 5

# Inclusive upper bound on team size for each tier; anything larger is enterprise
SCALE_THRESHOLDS: List[Tuple[int, ProjectScale]] = [
    (3, ProjectScale.MICRO),
    (10, ProjectScale.SMALL),
    (50, ProjectScale.MEDIUM),
    (200, ProjectScale.LARGE),
]


def _team_size(value: Any) -> float:
    # Intake data is merged unchecked, so a model may have left text here
    if isinstance(value, bool) or value is None:
        return DEFAULT_TEAM_SIZE
    try:
        return float(value)
    except (TypeError, ValueError):
        return DEFAULT_TEAM_SIZE


def determine_project_scale(intake: ProjectIntakeData) -> ProjectScale:
    """Map the intake's team size to a scale tier (team of 5 when unknown)."""
    team_size = _team_size(intake.team_size)
    for upper_bound, scale in SCALE_THRESHOLDS:
        if team_size <= upper_bound:
            return scale
    return ProjectScale.ENTERPRISE
