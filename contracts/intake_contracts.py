"""Intake contracts for the conversational project definition dialogue."""

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import List, Optional
from enum import Enum


class ConversationPhase(str, Enum):
    """Where the intake conversation currently stands."""
    INTAKE = "intake"
    CLARIFICATION = "clarification"
    CONFIRMATION = "confirmation"
    COMPLETE = "complete"


class MessageRole(str, Enum):
    """Author of a conversation message."""
    USER = "user"
    ASSISTANT = "assistant"


class ProjectScale(str, Enum):
    """Scale tier derived from team size."""
    MICRO = "micro"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"


class ConversationMessage(BaseModel):
    """A single turn in the intake conversation."""
    role: MessageRole
    content: str


class ProjectIntakeData(BaseModel):
    """Project parameters accumulated over the intake conversation.

    Every field is optional until confirmation. Keys the model invents are kept
    as extras so a later turn can still see them.
    """
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    description: Optional[str] = None
    objective: Optional[str] = None
    success_criteria: Optional[List[str]] = None
    key_stakeholders: Optional[List[str]] = None
    constraints: Optional[List[str]] = None
    target_timeline: Optional[str] = None
    budget_range: Optional[str] = None
    team_size: Optional[int] = None
    dependencies: Optional[List[str]] = None

    def merged_with(self, updates: dict) -> "ProjectIntakeData":
        """Shallow last-write-wins merge.

        Keys present in ``updates`` overwrite, keys absent are kept. Values are
        not checked: one that does not fit its field's type is stored as given
        rather than dropped, and the fields around it still validate normally.
        """
        merged = {**self.model_dump(exclude_unset=True, warnings=False), **updates}
        try:
            return ProjectIntakeData.model_validate(merged)
        except ValidationError as e:
            raw_keys = {err["loc"][0] for err in e.errors() if err["loc"]}

        valid = ProjectIntakeData.model_validate({k: v for k, v in merged.items() if k not in raw_keys})
        return ProjectIntakeData.model_construct(
            **valid.model_dump(exclude_unset=True, warnings=False),
            **{k: merged[k] for k in raw_keys},
        )


class IntakeTurnResult(BaseModel):
    """Outcome of one intake dialogue turn."""
    response: str = Field(..., description="Assistant reply shown to the user")
    extracted_data: ProjectIntakeData = Field(default_factory=ProjectIntakeData)
    phase: ConversationPhase = Field(...)
    confidence: float = Field(..., ge=0.0, le=1.0)
    missing_fields: List[str] = Field(default_factory=list, description="Fields the model still wants")
    degraded: bool = Field(default=False, description="True when the reply was not parseable JSON")


class ConversationContext(BaseModel):
    """Conversation state carried by the caller from one turn to the next."""
    messages: List[ConversationMessage] = Field(default_factory=list)
    extracted_data: ProjectIntakeData = Field(default_factory=ProjectIntakeData)
    phase: ConversationPhase = ConversationPhase.INTAKE

    def record_turn(self, user_message: str, result: IntakeTurnResult) -> "ConversationContext":
        """Return the context for the next turn after ``result`` was produced."""
        return ConversationContext(
            messages=[
                *self.messages,
                ConversationMessage(role=MessageRole.USER, content=user_message),
                ConversationMessage(role=MessageRole.ASSISTANT, content=result.response),
            ],
            extracted_data=result.extracted_data,
            phase=result.phase,
        )
