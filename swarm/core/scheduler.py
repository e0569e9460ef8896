"""Scheduler - per-agent think loops and recurring jobs.

Each agent gets its own timer task firing at the agent's think interval. A
fire is single-flight: when the agent is still busy with its previous cycle
the tick is dropped, not queued.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from swarm.agents.base import Agent
from swarm.utils.logging import get_logger

CycleFn = Callable[[Agent], Awaitable[Any]]
JobFn = Callable[[], Awaitable[Any]]

logger = get_logger(__name__)


class SchedulerState:
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Scheduler:
    """Drives think cycles on an asyncio event loop."""

    def __init__(self, cycle: CycleFn, shutdown_grace: float = 10.0) -> None:
        """Initialize the scheduler.

        Args:
            cycle: Coroutine run for one think cycle of an agent.
            shutdown_grace: Seconds ``stop`` waits for in-flight cycles.
        """
        self._cycle = cycle
        self._shutdown_grace = shutdown_grace
        self._agents: dict[str, Agent] = {}
        self._jobs: dict[str, tuple[float, JobFn]] = {}
        self._timers: dict[str, asyncio.Task[None]] = {}
        self._in_flight: set[asyncio.Task[None]] = set()
        self._state = SchedulerState.IDLE

    @property
    def state(self) -> str:
        return self._state

    @property
    def running(self) -> bool:
        return self._state == SchedulerState.RUNNING

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def add_agent(self, agent: Agent) -> None:
        """Give an agent a think loop (started now if the scheduler runs)."""
        self._agents[agent.role] = agent
        if self.running:
            self._start_timer(f"agent:{agent.role}", self._agent_loop(agent))

    def schedule(self, name: str, interval: float, callback: JobFn) -> None:
        """Register a recurring job.

        Raises:
            ValueError: If the name is taken or the interval is not positive.
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        if name in self._jobs:
            raise ValueError(f"Job already scheduled: {name}")
        self._jobs[name] = (interval, callback)
        if self.running:
            self._start_timer(f"job:{name}", self._job_loop(name, interval, callback))

    def start(self) -> None:
        """Start every agent loop and job.

        Raises:
            RuntimeError: If the scheduler is already running or was stopped.
        """
        if self._state != SchedulerState.IDLE:
            raise RuntimeError(f"Scheduler cannot start from state {self._state}")
        self._state = SchedulerState.RUNNING

        for agent in self._agents.values():
            self._start_timer(f"agent:{agent.role}", self._agent_loop(agent))
        for name, (interval, callback) in self._jobs.items():
            self._start_timer(f"job:{name}", self._job_loop(name, interval, callback))

        logger.info("Scheduler started", agents=len(self._agents), jobs=len(self._jobs))

    def trigger(self, role: str) -> bool:
        """Fire an agent's think cycle now, under the single-flight rule.

        Returns:
            True if a cycle was started, False if the agent was busy, unknown
            or the scheduler has been stopped.
        """
        if self._state == SchedulerState.STOPPED:
            return False
        agent = self._agents.get(role)
        if agent is None:
            logger.warning("Trigger for unknown agent", role=role)
            return False
        return self._fire(agent, reason="trigger")

    async def stop(self, grace: float | None = None) -> None:
        """Cancel every timer, then let in-flight cycles finish.

        Cycles still running after ``grace`` seconds are cancelled.
        """
        if self._state == SchedulerState.STOPPED:
            return
        self._state = SchedulerState.STOPPED
        grace = self._shutdown_grace if grace is None else grace

        timers = list(self._timers.values())
        self._timers.clear()
        for timer in timers:
            timer.cancel()
        await asyncio.gather(*timers, return_exceptions=True)

        pending = set(self._in_flight)
        if pending:
            _, still_running = await asyncio.wait(pending, timeout=grace)
            for task in still_running:
                task.cancel()
            if still_running:
                logger.warning("Abandoning in-flight cycles", count=len(still_running))
                await asyncio.gather(*still_running, return_exceptions=True)

        logger.info("Scheduler stopped")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _start_timer(self, key: str, coro: Coroutine[Any, Any, None]) -> None:
        self._timers[key] = asyncio.create_task(coro, name=key)

    async def _agent_loop(self, agent: Agent) -> None:
        interval = agent.profile.think_interval_seconds
        while True:
            await asyncio.sleep(interval)
            self._fire(agent, reason="tick")

    async def _job_loop(self, name: str, interval: float, callback: JobFn) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await callback()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Scheduled job failed", job=name)

    def _fire(self, agent: Agent, reason: str) -> bool:
        if not agent.try_acquire():
            logger.debug("Skipping tick, agent busy", role=agent.role, reason=reason)
            return False

        started = asyncio.Event()
        task = asyncio.create_task(self._run_cycle(agent, started), name=f"cycle:{agent.role}")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

        def release_if_never_started(_task: asyncio.Task[None]) -> None:
            # A started cycle releases in its own finally
            if not started.is_set():
                agent.release()

        task.add_done_callback(release_if_never_started)
        return True

    async def _run_cycle(self, agent: Agent, started: asyncio.Event) -> None:
        started.set()
        try:
            await self._cycle(agent)
        except asyncio.CancelledError:
            logger.info("Think cycle cancelled", role=agent.role)
            raise
        except Exception:
            logger.exception("Think cycle crashed", role=agent.role)
        finally:
            agent.release()
