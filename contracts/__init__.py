"""Pydantic contracts for Autonoma.

Everything that crosses a model call, the store or the CLI is typed through
these contracts.
"""

from .intake_contracts import (
    ConversationPhase,
    MessageRole,
    ProjectScale,
    ConversationMessage,
    ProjectIntakeData,
    IntakeTurnResult,
    ConversationContext,
)

from .charter_contracts import (
    RACILevel,
    Objective,
    Scope,
    CharterStakeholder,
    CharterMilestone,
    CharterRisk,
    CharterContent,
)

from .tracking_contracts import (
    TaskStatus,
    TaskPriority,
    EscalationSeverity,
    EscalationStatus,
    TriggerType,
    Trend,
    Sentiment,
    parse_timestamp,
    TaskRecord,
    MilestoneRecord,
    EscalationRecord,
    ProjectSnapshot,
    HealthFactor,
    HealthScore,
    UpdateAnalysis,
    EscalationRecommendation,
)

__all__ = [
    # Intake
    "ConversationPhase",
    "MessageRole",
    "ProjectScale",
    "ConversationMessage",
    "ProjectIntakeData",
    "IntakeTurnResult",
    "ConversationContext",
    # Charter
    "RACILevel",
    "Objective",
    "Scope",
    "CharterStakeholder",
    "CharterMilestone",
    "CharterRisk",
    "CharterContent",
    # Tracking
    "TaskStatus",
    "TaskPriority",
    "EscalationSeverity",
    "EscalationStatus",
    "TriggerType",
    "Trend",
    "Sentiment",
    "parse_timestamp",
    "TaskRecord",
    "MilestoneRecord",
    "EscalationRecord",
    "ProjectSnapshot",
    "HealthFactor",
    "HealthScore",
    "UpdateAnalysis",
    "EscalationRecommendation",
]
