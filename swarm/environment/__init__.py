"""Development-environment collaborators and built-in capability handlers."""

from swarm.environment.adapters import (
    CommandResult,
    EmacsClientBridge,
    EnvironmentBridge,
    NullBridge,
    NullVoice,
    SayVoice,
    VoiceOutput,
    create_bridge,
    create_voice,
)
from swarm.environment.handlers import (
    BUILTIN_SPECS,
    SKILL_SPECS,
    EnvironmentCapabilities,
)

__all__ = [
    # Adapters
    "CommandResult",
    "EnvironmentBridge",
    "VoiceOutput",
    "EmacsClientBridge",
    "NullBridge",
    "SayVoice",
    "NullVoice",
    "create_bridge",
    "create_voice",
    # Handlers
    "BUILTIN_SPECS",
    "SKILL_SPECS",
    "EnvironmentCapabilities",
]
