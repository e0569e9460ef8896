"""Agent data models.

Profiles describe an agent before registration (role, personality, skills,
think schedule); AgentInfo is the read-only snapshot exposed by the registry.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class AgentStatus(str, Enum):
    """Observable state of an agent."""

    IDLE = "idle"  # waiting for its next tick
    BUSY = "busy"  # a think cycle is in flight


class VoiceStyle(str, Enum):
    """Speech style applied to spoken output."""

    PLAIN = "plain"
    ENERGETIC = "energetic"  # intro/ending phrases, see core.style


class VoiceProfile(BaseModel):
    """How an agent sounds when it speaks."""

    voice: str = Field(default="Samantha", description="Voice name passed to the speech adapter")
    rate: int = Field(default=165, ge=50, le=500, description="Words per minute")
    style: VoiceStyle = Field(default=VoiceStyle.PLAIN, description="Style transform")

    model_config = {"extra": "forbid"}


class AgentProfile(BaseModel):
    """Descriptor used to register an agent.

    The personality is only used to parameterize output style; it never
    influences routing or scheduling.
    """

    role: str = Field(..., min_length=1, description="Unique role name, e.g. 'coder'")
    name: str = Field(default="", description="Display name")
    personality: str = Field(default="", description="Personality descriptor")
    skills: list[str] = Field(..., description="Skill tags used for routing")
    instructions: str = Field(default="", description="Standing instructions for the agent")
    think_interval_seconds: float = Field(
        default=60.0, gt=0, description="Period of the agent's think loop"
    )
    voice: VoiceProfile = Field(default_factory=VoiceProfile)

    model_config = {"extra": "forbid"}

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: list[str]) -> list[str]:
        # Keep first-seen order; duplicates would inflate routing scores
        cleaned = list(dict.fromkeys(s.strip() for s in v if s.strip()))
        if not cleaned:
            raise ValueError("An agent needs at least one skill")
        return cleaned

    @property
    def display_name(self) -> str:
        return self.name or f"{self.role}_agent"


class AgentInfo(BaseModel):
    """Agent runtime information as returned by the registry."""

    role: str
    name: str
    personality: str = ""
    skills: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=list)
    status: AgentStatus = AgentStatus.IDLE
    pending_tasks: int = 0
    think_interval_seconds: float = 60.0
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}
