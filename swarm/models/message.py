"""Broadcast message models.

Every orchestration event that is surfaced to the environment or to the
other agents travels as a BroadcastMessage.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

SYSTEM_SENDER = "system"


class BroadcastKind(str, Enum):
    """Category of a broadcast."""

    SYSTEM = "system"  # lifecycle notices
    THOUGHT = "thought"  # final text of a completed run
    TASK = "task"  # task assignment
    ACTION = "action"  # capability being executed
    COORDINATION = "coordination"  # agent-to-agent chatter
    SPEECH = "speech"  # spoken output
    OUTCOME = "outcome"  # terminal run summary


class BroadcastMessage(BaseModel):
    """An append-only entry of the broadcast log."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    sender: str = Field(default=SYSTEM_SENDER, description="Originating role or 'system'")
    kind: BroadcastKind = BroadcastKind.SYSTEM
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "forbid", "frozen": True}

    def format(self) -> str:
        """Render as ``[HH:MM:SS] ROLE: text``."""
        return f"[{self.timestamp.strftime('%H:%M:%S')}] {self.sender.upper()}: {self.text}"
