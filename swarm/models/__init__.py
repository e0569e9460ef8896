"""Data models package.

This module defines all data models used by the agent swarm.
"""

from .agent import (
    AgentInfo,
    AgentProfile,
    AgentStatus,
    VoiceProfile,
    VoiceStyle,
)
from .capability import (
    CapabilityInvocation,
    CapabilityResult,
    CapabilitySpec,
)
from .message import (
    SYSTEM_SENDER,
    BroadcastKind,
    BroadcastMessage,
)
from .run import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    ConversationRun,
    RunOutcome,
    RunStatus,
)
from .task import (
    Task,
    TaskPriority,
)

__all__ = [
    # Agent models
    "AgentInfo",
    "AgentProfile",
    "AgentStatus",
    "VoiceProfile",
    "VoiceStyle",
    # Capability models
    "CapabilityInvocation",
    "CapabilityResult",
    "CapabilitySpec",
    # Broadcast models
    "SYSTEM_SENDER",
    "BroadcastKind",
    "BroadcastMessage",
    # Run models
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "ConversationRun",
    "RunOutcome",
    "RunStatus",
    # Task models
    "Task",
    "TaskPriority",
]
