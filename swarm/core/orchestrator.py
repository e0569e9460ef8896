"""Orchestrator - wires the swarm together.

Owns the agent and capability registries, the broadcast bus and the
scheduler, and implements the think cycle the scheduler drives: build a
prompt, run it through the RunController, broadcast what came of it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from swarm.agents.base import Agent
from swarm.models import (
    SYSTEM_SENDER,
    AgentProfile,
    BroadcastKind,
    BroadcastMessage,
    RunOutcome,
    Task,
    TaskPriority,
)
from swarm.utils.logging import clear_correlation_id, get_agent_logger, get_logger

from .capabilities import CapabilityRegistry
from .message_bus import BroadcastBus
from .registry import AgentRegistry
from .router import TaskRouter
from .run_controller import RunController
from .scheduler import Scheduler

if TYPE_CHECKING:
    from swarm.environment.handlers import EnvironmentCapabilities

logger = get_logger(__name__)

DEFAULT_PROMPT = (
    "As the {role} agent, analyze the current situation and decide what action "
    "would be most valuable right now."
)

CHECK_IN_JOB = "check_in"


def initial_task(description: str) -> Task:
    """The environment-analysis task submitted when the swarm starts."""
    return Task(
        description=description,
        required_skills=("analysis", "system design"),
        priority=TaskPriority.HIGH,
    )


class Orchestrator:
    """Central coordinator of the swarm."""

    def __init__(
        self,
        registry: AgentRegistry,
        capabilities: CapabilityRegistry,
        controller: RunController,
        bus: BroadcastBus,
        environment: EnvironmentCapabilities | None = None,
        prompt_history: int = 5,
        thought_preview: int = 200,
        check_in_interval: float = 120.0,
        shutdown_grace: float = 10.0,
        startup_task: Task | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            registry: Agent registry, populated through ``add_agent``.
            capabilities: Registry of capability handlers.
            controller: Runs think cycles against the reasoning service.
            bus: Broadcast bus for orchestration events.
            environment: Speech and environment relay; None keeps the swarm silent.
            prompt_history: Team broadcasts quoted in each prompt.
            thought_preview: Characters of a completed thought that are spoken.
            check_in_interval: Period of the inter-agent check-in.
            shutdown_grace: Seconds ``stop`` waits for in-flight cycles.
            startup_task: Task submitted by ``start``.
        """
        self.registry = registry
        self.capabilities = capabilities
        self.controller = controller
        self.bus = bus
        self.router = TaskRouter(registry)
        self.scheduler = Scheduler(self.think, shutdown_grace=shutdown_grace)
        self._environment = environment
        self._prompt_history = prompt_history
        self._thought_preview = thought_preview
        self._check_in_interval = check_in_interval
        self._startup_task = startup_task
        self._check_in_cursor = 0

    @property
    def running(self) -> bool:
        return self.scheduler.running

    async def add_agent(self, profile: AgentProfile) -> Agent:
        """Register an agent and give it a think loop.

        Raises:
            AgentAlreadyExistsError: If the role is already registered.
        """
        agent = await self.registry.register(profile)
        self.scheduler.add_agent(agent)
        get_agent_logger(agent.role, agent.name).info(
            "Agent registered",
            skills=list(agent.skills),
            capabilities=len(agent.capabilities),
            interval=profile.think_interval_seconds,
        )
        return agent

    async def start(self) -> None:
        """Start think loops and the check-in job, then submit the startup task."""
        self.scheduler.schedule(CHECK_IN_JOB, self._check_in_interval, self.check_in)
        self.scheduler.start()
        await self._system(f"Agent swarm online with {len(self.registry)} agents")
        if self._startup_task is not None:
            await self.submit_task(self._startup_task)

    async def stop(self, grace: float | None = None) -> None:
        """Stop every trigger and wait (bounded) for in-flight cycles."""
        await self.scheduler.stop(grace)
        await self._system("Agent swarm shutting down")

    async def submit_task(self, task: Task) -> Agent | None:
        """Route a task, announce the assignment and wake the assignee.

        If the assignee is mid-cycle the task stays queued for its next tick.

        Returns:
            The assignee, or None if no agent has a matching skill.
        """
        agent = await self.router.route(task)
        if agent is None:
            await self._system(f"No agent available for task: {task.description}")
            return None

        await self.bus.publish(
            BroadcastMessage(
                kind=BroadcastKind.TASK,
                text=f"Task assigned to {agent.role.upper()}: {task.description}",
                metadata={"task_id": task.id, "role": agent.role, "priority": task.priority.value},
            )
        )
        self.scheduler.trigger(agent.role)
        return agent

    def trigger(self, role: str) -> bool:
        """Ask an agent to think now; False if busy, unknown or stopped."""
        return self.scheduler.trigger(role)

    def build_prompt(self, agent: Agent, task: Task | None) -> str:
        """Instructions, then the task (or the default prompt), then team activity."""
        parts: list[str] = []
        if agent.profile.instructions:
            parts.append(agent.profile.instructions)
        parts.append(task.to_prompt() if task else DEFAULT_PROMPT.format(role=agent.role))

        if self._prompt_history > 0:
            team = [
                m
                for m in self.bus.history(exclude_sender=agent.role)
                if m.sender != SYSTEM_SENDER
            ][-self._prompt_history :]
            if team:
                parts.append("Recent team activity:\n" + "\n".join(m.format() for m in team))

        return "\n\n".join(parts)

    async def think(self, agent: Agent) -> RunOutcome:
        """One think cycle; the scheduler has already marked the agent busy."""
        log = get_agent_logger(agent.role, agent.name)
        task = agent.next_task()
        prompt = self.build_prompt(agent, task)
        log.info("Thinking", task_id=task.id if task else None)

        try:
            outcome = await self.controller.run(agent, prompt)
            agent.record_outcome(outcome)

            await self.bus.publish(
                BroadcastMessage(
                    sender=agent.role,
                    kind=BroadcastKind.OUTCOME,
                    text=outcome.summary(),
                    metadata={
                        "status": outcome.status.value,
                        "run_id": outcome.run.run_id,
                        "task_id": task.id if task else None,
                    },
                )
            )

            if outcome.succeeded and outcome.output:
                await self.bus.publish(
                    BroadcastMessage(
                        sender=agent.role,
                        kind=BroadcastKind.THOUGHT,
                        text=f"{agent.role.upper()} thoughts: {outcome.output}",
                    )
                )
                if self._environment is not None:
                    await self._environment.speak(agent, outcome.output[: self._thought_preview])
        finally:
            clear_correlation_id()

        return outcome

    async def check_in(self) -> BroadcastMessage | None:
        """Post a check-in from one agent to the next, rotating through the roster."""
        roles = self.registry.roles()
        if len(roles) < 2:
            return None

        speaker = roles[self._check_in_cursor % len(roles)]
        target = roles[(self._check_in_cursor + 1) % len(roles)]
        self._check_in_cursor += 1

        message = BroadcastMessage(
            sender=speaker,
            kind=BroadcastKind.COORDINATION,
            text=f"Checking in with {target} - any insights to share?",
        )
        await self.bus.publish(message)
        return message

    async def status(self) -> dict[str, Any]:
        return {
            "running": self.running,
            "scheduler": self.scheduler.state,
            "agents": len(self.registry),
            "busy": sum(1 for agent in await self.registry.all() if agent.busy),
            "in_flight": self.scheduler.in_flight,
            "broadcasts": self.bus.message_count,
            "capabilities": len(self.capabilities),
        }

    async def _system(self, text: str) -> None:
        logger.info(text)
        await self.bus.publish(BroadcastMessage(kind=BroadcastKind.SYSTEM, text=text))
