"""Task Router - skill-based assignment of tasks to agents."""

from __future__ import annotations

from swarm.agents.base import Agent
from swarm.core.registry import AgentRegistry
from swarm.models import Task
from swarm.utils.logging import get_logger

logger = get_logger(__name__)


def score(agent: Agent, task: Task) -> int:
    """Number of the task's required skills the agent has."""
    return sum(1 for skill in task.required_skills if agent.has_skill(skill))


class TaskRouter:
    """Selects the agent whose skills cover most of a task's requirements.

    The strictly highest score wins; ties go to the agent registered first.
    A best score of zero leaves the task unrouted.
    """

    def __init__(self, registry: AgentRegistry) -> None:
        self._registry = registry

    async def select(self, task: Task) -> Agent | None:
        """Pick the assignee without side effects."""
        best: Agent | None = None
        best_score = 0
        for agent in await self._registry.all():
            candidate = score(agent, task)
            if candidate > best_score:
                best, best_score = agent, candidate
        return best

    async def route(self, task: Task) -> Agent | None:
        """Pick the assignee and queue the task into its next think cycle.

        Returns:
            The chosen agent, or None if no agent has any required skill.
        """
        agent = await self.select(task)
        if agent is None:
            logger.info("Task unrouted", task_id=task.id, required_skills=list(task.required_skills))
            return None

        agent.assign(task)
        logger.info(
            "Task routed",
            task_id=task.id,
            role=agent.role,
            score=score(agent, task),
        )
        return agent
