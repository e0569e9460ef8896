"""Task data models."""

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class TaskPriority(str, Enum):
    """Priority tag carried into the assignee's prompt."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class Task(BaseModel):
    """A unit of work routed to one agent.

    Immutable once created. Routing consumes a task without removing it.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    description: str = Field(..., min_length=1)
    required_skills: tuple[str, ...] = Field(default_factory=tuple)
    priority: TaskPriority = TaskPriority.NORMAL
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("required_skills", mode="before")
    @classmethod
    def dedupe_skills(cls, v: object) -> object:
        if isinstance(v, (list, tuple, set, frozenset)):
            return tuple(dict.fromkeys(str(s).strip() for s in v if str(s).strip()))
        return v

    def to_prompt(self) -> str:
        """Render the task as think-cycle prompt context."""
        skills = ", ".join(self.required_skills) or "none specified"
        return (
            f"You have been assigned a task: {self.description}. "
            f"This requires skills: {skills}. "
            f"Priority: {self.priority.value}. "
            "How will you approach this?"
        )
