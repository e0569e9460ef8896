"""Agent module - runtime handle, built-in roster and profile loading.

This module provides:
- Agent: the registered agent with its busy flag and pending-task queue
- DEFAULT_PROFILES: the built-in five-agent roster
- AgentLoader / load_profiles: YAML profile loading
"""

from swarm.agents.base import Agent
from swarm.agents.loader import (
    AgentConfigError,
    AgentLoader,
    AgentLoadError,
    load_profiles,
)
from swarm.agents.profiles import DEFAULT_PROFILES, default_profiles

__all__ = [
    # Base
    "Agent",
    # Roster
    "DEFAULT_PROFILES",
    "default_profiles",
    # Loader
    "AgentConfigError",
    "AgentLoader",
    "AgentLoadError",
    "load_profiles",
]
