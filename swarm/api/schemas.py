"""API schema definitions.

Request/Response schemas used by the admin API endpoints.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from swarm.models import (
    AgentInfo,
    AgentStatus,
    BroadcastKind,
    BroadcastMessage,
    TaskPriority,
)

# =============================================================================
# Common Schemas
# =============================================================================


class APIResponse(BaseModel):
    """Standard API response envelope."""

    success: bool = Field(..., description="Whether the request succeeded")
    data: Any = Field(default=None, description="Response payload")
    error: str | None = Field(default=None, description="Error message")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")


# =============================================================================
# Agent Schemas
# =============================================================================


class AgentResponse(BaseModel):
    """Agent as exposed by the API."""

    role: str = Field(..., description="Unique role")
    name: str = Field(..., description="Display name")
    personality: str = Field(default="", description="Personality descriptor")
    skills: list[str] = Field(default_factory=list, description="Skill tags")
    capabilities: list[str] = Field(default_factory=list, description="Capability manifest")
    status: AgentStatus = Field(..., description="idle or busy")
    pending_tasks: int = Field(default=0, description="Tasks queued for the next cycle")
    think_interval_seconds: float = Field(..., description="Think-loop period")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_info(cls, info: AgentInfo) -> "AgentResponse":
        return cls(**info.model_dump())


class ThinkResponse(BaseModel):
    """Result of a manual think trigger."""

    role: str
    triggered: bool


# =============================================================================
# Task Schemas
# =============================================================================


class SubmitTaskRequest(BaseModel):
    """Task submission request."""

    description: str = Field(..., min_length=1, description="What needs to be done")
    required_skills: list[str] = Field(default_factory=list, description="Skills used for routing")
    priority: TaskPriority = Field(default=TaskPriority.NORMAL, description="Priority tag")

    model_config = {
        "json_schema_extra": {
            "example": {
                "description": "Profile the request pipeline and report the slowest stage",
                "required_skills": ["performance tuning", "profiling"],
                "priority": "high",
            }
        }
    }


class TaskSubmissionResponse(BaseModel):
    """Where a submitted task went."""

    task_id: str
    routed: bool
    assigned_to: str | None = None


# =============================================================================
# Broadcast Schemas
# =============================================================================


class BroadcastResponse(BaseModel):
    """One broadcast log entry."""

    id: str
    timestamp: datetime
    sender: str
    kind: BroadcastKind
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_message(cls, message: BroadcastMessage) -> "BroadcastResponse":
        return cls(**message.model_dump())


# =============================================================================
# Capability Schemas
# =============================================================================


class CapabilityResponse(BaseModel):
    """A registered capability."""

    name: str
    description: str = ""
    has_handler: bool = True


# =============================================================================
# Health Schemas
# =============================================================================


class HealthResponse(BaseModel):
    """Service health."""

    status: str = Field(..., description="healthy or stopped")
    version: str
    swarm: dict[str, Any] = Field(default_factory=dict)
