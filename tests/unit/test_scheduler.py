"""Scheduler unit tests."""

import asyncio

import pytest

from swarm.agents.base import Agent
from swarm.core.scheduler import Scheduler, SchedulerState
from tests.helpers import make_profile, settle


def make_agent(role: str = "coder", interval: float = 60.0) -> Agent:
    return Agent(make_profile(role, ["coding"], interval=interval), ["read_file"])


class BlockingCycle:
    """Think cycle that holds the agent until released."""

    def __init__(self) -> None:
        self.release = asyncio.Event()
        self.started: list[str] = []
        self.busy_seen: list[bool] = []

    async def __call__(self, agent: Agent) -> None:
        self.started.append(agent.role)
        self.busy_seen.append(agent.busy)
        await self.release.wait()
        self.busy_seen.append(agent.busy)


class TestSchedulerLifecycle:
    """Test start/stop semantics."""

    @pytest.mark.asyncio
    async def test_states(self):
        scheduler = Scheduler(BlockingCycle())

        assert scheduler.state == SchedulerState.IDLE
        scheduler.start()
        assert scheduler.running
        await scheduler.stop()
        assert scheduler.state == SchedulerState.STOPPED

    @pytest.mark.asyncio
    async def test_start_twice_raises(self):
        scheduler = Scheduler(BlockingCycle())
        scheduler.start()

        with pytest.raises(RuntimeError):
            scheduler.start()
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_cannot_restart_after_stop(self):
        scheduler = Scheduler(BlockingCycle())
        scheduler.start()
        await scheduler.stop()

        with pytest.raises(RuntimeError):
            scheduler.start()

    @pytest.mark.asyncio
    async def test_stop_is_idempotent(self):
        scheduler = Scheduler(BlockingCycle())
        scheduler.start()

        await scheduler.stop()
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_trigger_after_stop_is_ignored(self):
        """Test no cycle starts once the scheduler is stopped."""
        cycle = BlockingCycle()
        scheduler = Scheduler(cycle)
        agent = make_agent()
        scheduler.add_agent(agent)
        scheduler.start()
        await scheduler.stop()

        assert scheduler.trigger("coder") is False
        assert cycle.started == []
        assert not agent.busy

    @pytest.mark.asyncio
    async def test_stop_waits_for_in_flight_cycle(self):
        """Test a cycle that finishes within the grace period completes."""
        finished = []

        async def cycle(agent):
            await asyncio.sleep(0.01)
            finished.append(agent.role)

        scheduler = Scheduler(cycle)
        scheduler.add_agent(make_agent())
        scheduler.start()
        scheduler.trigger("coder")

        await scheduler.stop(grace=1.0)

        assert finished == ["coder"]
        assert scheduler.in_flight == 0

    @pytest.mark.asyncio
    async def test_stop_cancels_cycles_past_grace(self):
        """Test a hung cycle is cancelled and the agent released."""
        cycle = BlockingCycle()
        scheduler = Scheduler(cycle)
        agent = make_agent()
        scheduler.add_agent(agent)
        scheduler.start()
        scheduler.trigger("coder")
        await asyncio.sleep(0)

        await scheduler.stop(grace=0.01)

        assert scheduler.in_flight == 0
        assert not agent.busy
        assert len(cycle.busy_seen) == 1


class TestSingleFlight:
    """Test the per-agent single-flight guard."""

    @pytest.mark.asyncio
    async def test_busy_for_whole_cycle(self):
        """Test the agent is busy from start to end of its cycle."""
        cycle = BlockingCycle()
        scheduler = Scheduler(cycle)
        agent = make_agent()
        scheduler.add_agent(agent)
        scheduler.start()

        assert scheduler.trigger("coder") is True
        await asyncio.sleep(0)
        assert agent.busy

        cycle.release.set()
        await settle(scheduler)

        assert cycle.busy_seen == [True, True]
        assert not agent.busy
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_trigger_while_busy_is_skipped(self):
        cycle = BlockingCycle()
        scheduler = Scheduler(cycle)
        scheduler.add_agent(make_agent())
        scheduler.start()

        assert scheduler.trigger("coder") is True
        assert scheduler.trigger("coder") is False
        await asyncio.sleep(0)
        assert scheduler.trigger("coder") is False

        cycle.release.set()
        await settle(scheduler)

        assert cycle.started == ["coder"]
        assert scheduler.trigger("coder") is True
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_back_to_back_cycle_stays_busy(self):
        """Test a cycle started right after the previous one ends keeps the agent busy."""
        loop = asyncio.get_running_loop()
        release = asyncio.Event()
        calls = []

        async def cycle(agent):
            calls.append(agent.role)
            if len(calls) == 1:
                # Runs before the first cycle's task has finished
                loop.call_soon(scheduler.trigger, "coder")
                return
            await release.wait()

        scheduler = Scheduler(cycle)
        agent = make_agent()
        scheduler.add_agent(agent)
        scheduler.start()

        assert scheduler.trigger("coder") is True
        for _ in range(10):
            await asyncio.sleep(0)

        assert calls == ["coder", "coder"]
        assert agent.busy
        assert scheduler.trigger("coder") is False
        assert scheduler.in_flight == 1

        release.set()
        await settle(scheduler)
        assert not agent.busy
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_released_when_cancelled_before_start(self):
        """Test a cycle cancelled before its first step still frees the agent."""
        cycle = BlockingCycle()
        scheduler = Scheduler(cycle)
        agent = make_agent()
        scheduler.add_agent(agent)
        scheduler.start()

        assert scheduler.trigger("coder") is True
        for task in asyncio.all_tasks():
            if task.get_name() == "cycle:coder":
                task.cancel()
        await settle(scheduler)

        assert cycle.started == []
        assert not agent.busy
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_released_when_cycle_raises(self):
        """Test a crashing cycle still clears the busy flag."""
        calls = []

        async def cycle(agent):
            calls.append(agent.role)
            raise RuntimeError("boom")

        scheduler = Scheduler(cycle)
        agent = make_agent()
        scheduler.add_agent(agent)
        scheduler.start()

        scheduler.trigger("coder")
        await settle(scheduler)

        assert not agent.busy
        assert scheduler.trigger("coder") is True
        await settle(scheduler)
        assert calls == ["coder", "coder"]
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_agents_are_independent(self):
        """Test one busy agent does not block another."""
        cycle = BlockingCycle()
        scheduler = Scheduler(cycle)
        scheduler.add_agent(make_agent("coder"))
        scheduler.add_agent(make_agent("architect"))
        scheduler.start()

        assert scheduler.trigger("coder") is True
        assert scheduler.trigger("architect") is True
        await asyncio.sleep(0)

        assert sorted(cycle.started) == ["architect", "coder"]
        assert scheduler.in_flight == 2
        cycle.release.set()
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_trigger_unknown_agent(self):
        scheduler = Scheduler(BlockingCycle())
        scheduler.start()

        assert scheduler.trigger("ghost") is False
        await scheduler.stop()


class TestPeriodicTicks:
    """Test timer-driven cycles and jobs."""

    @pytest.mark.asyncio
    async def test_agent_ticks_at_interval(self):
        calls = []

        async def cycle(agent):
            calls.append(agent.role)

        scheduler = Scheduler(cycle)
        scheduler.add_agent(make_agent(interval=0.01))
        scheduler.start()
        await asyncio.sleep(0.065)
        await scheduler.stop()

        assert len(calls) >= 3

    @pytest.mark.asyncio
    async def test_ticks_dropped_while_busy(self):
        """Test ticks during a long cycle are dropped, not queued."""
        cycle = BlockingCycle()
        scheduler = Scheduler(cycle)
        scheduler.add_agent(make_agent(interval=0.01))
        scheduler.start()
        await asyncio.sleep(0.065)

        assert cycle.started == ["coder"]
        cycle.release.set()
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_agent_added_after_start_ticks(self):
        calls = []

        async def cycle(agent):
            calls.append(agent.role)

        scheduler = Scheduler(cycle)
        scheduler.start()
        scheduler.add_agent(make_agent(interval=0.01))
        await asyncio.sleep(0.035)
        await scheduler.stop()

        assert calls

    @pytest.mark.asyncio
    async def test_job_runs_and_survives_errors(self):
        """Test a failing job keeps being scheduled."""
        runs = []

        async def job():
            runs.append(1)
            raise ValueError("flaky")

        scheduler = Scheduler(BlockingCycle())
        scheduler.schedule("check_in", 0.01, job)
        scheduler.start()
        await asyncio.sleep(0.065)
        await scheduler.stop()

        assert len(runs) >= 3

    def test_schedule_validation(self):
        scheduler = Scheduler(BlockingCycle())

        async def job():
            pass

        with pytest.raises(ValueError):
            scheduler.schedule("check_in", 0, job)

        scheduler.schedule("check_in", 1, job)
        with pytest.raises(ValueError):
            scheduler.schedule("check_in", 1, job)

    @pytest.mark.asyncio
    async def test_no_ticks_before_start(self):
        calls = []

        async def cycle(agent):
            calls.append(agent.role)

        scheduler = Scheduler(cycle)
        scheduler.add_agent(make_agent(interval=0.01))
        await asyncio.sleep(0.03)

        assert calls == []
