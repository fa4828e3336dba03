"""Composite project health score.

overall = 0.3*timeline + 0.2*resource + 0.25*quality + 0.25*risk

- timeline: share of tasks not overdue
- resource: update cadence this week (5 updates saturate it)
- quality:  completed minus blocked tasks, centred on 50
- risk:     open escalations, with critical ones penalised again on top

No history is kept, so only Timeline and Risk can report a downward trend.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from contracts import (
    EscalationSeverity,
    EscalationStatus,
    HealthFactor,
    HealthScore,
    ProjectSnapshot,
    TaskStatus,
    Trend,
)

TIMELINE_WEIGHT = 0.3
RESOURCE_WEIGHT = 0.2
QUALITY_WEIGHT = 0.25
RISK_WEIGHT = 0.25

POINTS_PER_UPDATE = 20
OPEN_ESCALATION_PENALTY = 10
CRITICAL_ESCALATION_PENALTY = 20
QUALITY_BASELINE = 50

# No stakeholder feedback is collected yet
STAKEHOLDER_PLACEHOLDER = 75


def _round(value: float) -> int:
    """Round half up (70.5 -> 71), not Python's half-to-even."""
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def calculate_health_score(
    snapshot: ProjectSnapshot,
    now: Optional[datetime] = None,
) -> HealthScore:
    """Score a project from its live task, escalation and update statistics.

    Args:
        snapshot: Tasks, milestones, escalations and this week's update count
        now: Evaluation time (defaults to the current UTC time); naive values are UTC

    Returns:
        HealthScore with overall and per-area scores
    """
    tasks = snapshot.tasks
    total_tasks = len(tasks) or 1

    overdue_tasks = count_overdue_tasks(snapshot, now)
    timeline_score = max(0.0, 100 - (overdue_tasks / total_tasks) * 100)

    resource_score = min(100, snapshot.updates_this_week * POINTS_PER_UPDATE)

    completed_tasks = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    blocked_tasks = sum(1 for t in tasks if t.status == TaskStatus.BLOCKED)
    quality_score = _clamp(((completed_tasks - blocked_tasks) / total_tasks) * 100 + QUALITY_BASELINE)

    open_escalations = [e for e in snapshot.escalations if e.status == EscalationStatus.OPEN]
    critical_escalations = sum(1 for e in open_escalations if e.severity == EscalationSeverity.CRITICAL)
    risk_score = max(
        0,
        100
        - len(open_escalations) * OPEN_ESCALATION_PENALTY
        - critical_escalations * CRITICAL_ESCALATION_PENALTY,
    )

    overall = _round(
        timeline_score * TIMELINE_WEIGHT
        + resource_score * RESOURCE_WEIGHT
        + quality_score * QUALITY_WEIGHT
        + risk_score * RISK_WEIGHT
    )

    timeline = _round(timeline_score)
    resource = _round(resource_score)
    quality = _round(quality_score)
    risk = _round(risk_score)

    return HealthScore(
        overall=int(_clamp(overall)),
        timeline=timeline,
        resource=resource,
        quality=quality,
        stakeholder=STAKEHOLDER_PLACEHOLDER,
        risk=risk,
        factors=[
            HealthFactor(
                name="Timeline",
                score=timeline,
                trend=Trend.DOWN if overdue_tasks > 0 else Trend.STABLE,
                notes=f"{overdue_tasks} overdue" if overdue_tasks else None,
            ),
            HealthFactor(name="Resources", score=resource, trend=Trend.STABLE),
            HealthFactor(name="Quality", score=quality, trend=Trend.STABLE),
            HealthFactor(
                name="Risk",
                score=risk,
                trend=Trend.DOWN if open_escalations else Trend.STABLE,
                notes=f"{len(open_escalations)} open escalations" if open_escalations else None,
            ),
        ],
    )


def count_overdue_tasks(snapshot: ProjectSnapshot, now: Optional[datetime] = None) -> int:
    """Tasks past their due date and not completed."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return sum(
        1 for t in snapshot.tasks
        if t.due_date is not None and t.due_date < now and t.status != TaskStatus.COMPLETED
    )
