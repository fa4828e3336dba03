"""Tracking contracts: tasks, milestones, escalations and the health score."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Lifecycle state of a task."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority."""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    CRITICAL = "critical"


class EscalationSeverity(str, Enum):
    """How urgent an escalation is."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class EscalationStatus(str, Enum):
    """Lifecycle state of an escalation."""
    OPEN = "open"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class TriggerType(str, Enum):
    """What kind of problem raised an escalation."""
    TIMELINE = "timeline"
    RESOURCE = "resource"
    SCOPE = "scope"
    COMMUNICATION = "communication"
    QUALITY = "quality"
    BUDGET = "budget"


class Trend(str, Enum):
    """Direction a health factor is moving."""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class Sentiment(str, Enum):
    """Tone of a team member's progress update."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    CONCERNING = "concerning"


def parse_timestamp(value: Optional[object]) -> Optional[datetime]:
    """Parse an ISO-8601 date or timestamp; naive values are read as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if not isinstance(value, datetime):
        raise ValueError(f"Not a timestamp: {value!r}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class TaskRecord(BaseModel):
    """A task as seen by the health scorer.

    Status is kept as a plain string so records with unexpected values still
    score; comparisons use TaskStatus values.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    title: str = ""
    status: str = TaskStatus.PENDING.value
    due_date: Optional[datetime] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, v):
        # A due date that cannot be read never makes the task overdue
        try:
            return parse_timestamp(v)
        except ValueError:
            return None


class MilestoneRecord(BaseModel):
    """A milestone as seen by the health scorer."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: str = ""
    status: str = "pending"
    target_date: Optional[str] = None


class EscalationRecord(BaseModel):
    """An escalation as seen by the health scorer."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    status: str = EscalationStatus.OPEN.value
    severity: str = EscalationSeverity.MEDIUM.value
    description: str = ""


class ProjectSnapshot(BaseModel):
    """Live project statistics fed to the health scorer."""
    tasks: List[TaskRecord] = Field(default_factory=list)
    milestones: List[MilestoneRecord] = Field(default_factory=list)
    escalations: List[EscalationRecord] = Field(default_factory=list)
    updates_this_week: int = Field(default=0, ge=0)


class HealthFactor(BaseModel):
    """One named component of the health score."""
    name: str
    score: int
    trend: Trend
    notes: Optional[str] = None


class HealthScore(BaseModel):
    """Composite 0-100 project health metric, recomputed on every read."""
    overall: int = Field(..., ge=0, le=100)
    timeline: int = Field(..., ge=0, le=100)
    resource: int = Field(..., ge=0, le=100)
    quality: int = Field(..., ge=0, le=100)
    stakeholder: int = Field(..., ge=0, le=100)
    risk: int = Field(..., ge=0, le=100)
    factors: List[HealthFactor] = Field(default_factory=list)


class UpdateAnalysis(BaseModel):
    """Structured reading of a free-text progress update."""
    progress_percentage: float = Field(..., ge=0, le=100)
    new_status: TaskStatus
    blockers: List[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    summary: str = ""


class EscalationRecommendation(BaseModel):
    """Whether and how a project should be escalated."""
    should_escalate: bool
    severity: EscalationSeverity = EscalationSeverity.LOW
    trigger_type: TriggerType = TriggerType.TIMELINE
    recommended_action: str = ""
    message: str = ""
