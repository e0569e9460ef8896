"""Core components package.

This package contains the orchestration engine of the agent swarm.
"""

from .capabilities import (
    CapabilityDispatcher,
    CapabilityHandler,
    CapabilityRegistry,
)
from .message_bus import (
    BroadcastBus,
    BroadcastHandler,
)
from .orchestrator import (
    DEFAULT_PROMPT,
    Orchestrator,
    initial_task,
)
from .registry import (
    BASELINE_CAPABILITIES,
    SKILL_CAPABILITIES,
    AgentAlreadyExistsError,
    AgentNotFoundError,
    AgentRegistry,
    derive_capabilities,
)
from .router import TaskRouter
from .run_controller import (
    NO_RESPONSE,
    RunController,
)
from .scheduler import Scheduler
from .style import stylize

__all__ = [
    # Registry
    "AgentRegistry",
    "AgentNotFoundError",
    "AgentAlreadyExistsError",
    "BASELINE_CAPABILITIES",
    "SKILL_CAPABILITIES",
    "derive_capabilities",
    # Capabilities
    "CapabilityRegistry",
    "CapabilityDispatcher",
    "CapabilityHandler",
    # Routing
    "TaskRouter",
    # Runs
    "RunController",
    "NO_RESPONSE",
    # Scheduling
    "Scheduler",
    # Broadcast
    "BroadcastBus",
    "BroadcastHandler",
    # Style
    "stylize",
    # Orchestrator
    "Orchestrator",
    "DEFAULT_PROMPT",
    "initial_task",
]
