"""Agent Registry - agent registration and lookup.

Registration turns an AgentProfile into an Agent whose capability manifest is
the baseline set shared by every agent plus whatever its skills imply.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping

from swarm.agents.base import Agent
from swarm.models import AgentInfo, AgentProfile

BASELINE_CAPABILITIES: tuple[str, ...] = (
    "execute_environment",
    "read_file",
    "write_file",
    "speak",
    "coordinate_with_agents",
    "analyze_codebase",
)

SKILL_CAPABILITIES: Mapping[str, tuple[str, ...]] = {
    "coding": ("write_code", "debug_issue", "refactor_code"),
    "system design": ("design_architecture", "create_patterns"),
    "performance": ("profile_performance", "optimize_bottleneck"),
    "research": ("research_topic", "document_findings"),
}


def derive_capabilities(skills: Iterable[str]) -> list[str]:
    """Capability manifest for a skill set, baseline first, in skill order."""
    manifest = list(BASELINE_CAPABILITIES)
    for skill in skills:
        for name in SKILL_CAPABILITIES.get(skill, ()):
            if name not in manifest:
                manifest.append(name)
    return manifest


class AgentNotFoundError(Exception):
    """Raised when an agent is not found in the registry."""

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"Agent not found: {role}")


class AgentAlreadyExistsError(Exception):
    """Raised when trying to register a role that is already registered."""

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"Agent already exists: {role}")


class AgentRegistry:
    """Registry of the swarm's agents.

    Populated at startup and read-only afterwards. Iteration order is
    registration order, which the task router relies on for tie-breaks.
    """

    def __init__(self) -> None:
        self._agents: dict[str, Agent] = {}
        self._lock = asyncio.Lock()

    async def register(self, profile: AgentProfile) -> Agent:
        """Register an agent.

        Args:
            profile: The agent descriptor.

        Returns:
            The registered Agent with its derived capability manifest.

        Raises:
            AgentAlreadyExistsError: If the role is already registered.
        """
        async with self._lock:
            if profile.role in self._agents:
                raise AgentAlreadyExistsError(profile.role)

            agent = Agent(profile, derive_capabilities(profile.skills))
            self._agents[profile.role] = agent
            return agent

    async def get(self, role: str) -> Agent:
        """Get an agent by role.

        Raises:
            AgentNotFoundError: If the role is not registered.
        """
        async with self._lock:
            if role not in self._agents:
                raise AgentNotFoundError(role)
            return self._agents[role]

    async def all(self) -> list[Agent]:
        """All agents in registration order."""
        async with self._lock:
            return list(self._agents.values())

    async def list_info(self) -> list[AgentInfo]:
        async with self._lock:
            return [agent.info() for agent in self._agents.values()]

    def roles(self) -> list[str]:
        return list(self._agents)

    def __len__(self) -> int:
        """Return the number of registered agents."""
        return len(self._agents)

    def __contains__(self, role: str) -> bool:
        """Check if a role is registered."""
        return role in self._agents
