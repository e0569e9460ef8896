"""Task Router unit tests."""

import pytest

from swarm.core.router import TaskRouter, score
from swarm.models import Task
from tests.helpers import make_profile


@pytest.fixture
def router(registry):
    return TaskRouter(registry)


class TestScore:
    """Test the skill-overlap score."""

    @pytest.mark.asyncio
    async def test_counts_matching_skills(self, registry):
        agent = await registry.register(make_profile("architect", ["analysis", "system design"]))

        assert score(agent, Task(description="x", required_skills=["analysis"])) == 1
        assert score(agent, Task(description="x", required_skills=["analysis", "system design"])) == 2
        assert score(agent, Task(description="x", required_skills=["coding"])) == 0

    @pytest.mark.asyncio
    async def test_no_normalization_by_skill_count(self, registry):
        """Test a broad agent is not penalized for its extra skills."""
        broad = await registry.register(make_profile("broad", ["analysis", "coding", "research", "testing"]))
        narrow = await registry.register(make_profile("narrow", ["analysis"]))
        task = Task(description="x", required_skills=["analysis"])

        assert score(broad, task) == score(narrow, task) == 1


class TestTaskRouter:
    """Test TaskRouter class."""

    @pytest.mark.asyncio
    async def test_picks_matching_agent(self, registry, router):
        """Test the analysis agent beats the coding agent."""
        await registry.register(make_profile("coder", ["coding"]))
        analyst = await registry.register(make_profile("architect", ["analysis", "system design"]))

        chosen = await router.route(Task(description="Assess", required_skills=["analysis"]))

        assert chosen is analyst

    @pytest.mark.asyncio
    async def test_highest_score_wins(self, registry, router):
        await registry.register(make_profile("one", ["analysis"]))
        both = await registry.register(make_profile("two", ["analysis", "research"]))

        chosen = await router.select(Task(description="x", required_skills=["analysis", "research"]))

        assert chosen is both

    @pytest.mark.asyncio
    async def test_tie_goes_to_first_registered(self, registry, router):
        """Test ties are resolved by registration order."""
        first = await registry.register(make_profile("first", ["coding"]))
        await registry.register(make_profile("second", ["coding"]))
        task = Task(description="x", required_skills=["coding"])

        assert [await router.select(task) for _ in range(5)] == [first] * 5

    @pytest.mark.asyncio
    async def test_unrouted_when_no_skill_matches(self, registry, router):
        """Test a best score of zero leaves the task unrouted."""
        agent = await registry.register(make_profile("coder", ["coding"]))

        chosen = await router.route(Task(description="x", required_skills=["painting"]))

        assert chosen is None
        assert agent.pending_tasks == 0

    @pytest.mark.asyncio
    async def test_unrouted_without_required_skills(self, registry, router):
        await registry.register(make_profile("coder", ["coding"]))

        assert await router.route(Task(description="x")) is None

    @pytest.mark.asyncio
    async def test_unrouted_with_empty_registry(self, router):
        assert await router.route(Task(description="x", required_skills=["coding"])) is None

    @pytest.mark.asyncio
    async def test_route_queues_task(self, registry, router):
        """Test routing pushes the task into the agent's next cycle."""
        agent = await registry.register(make_profile("coder", ["coding"]))
        task = Task(description="Fix bug", required_skills=["coding"])

        await router.route(task)

        assert agent.pending_tasks == 1
        assert agent.next_task() is task

    @pytest.mark.asyncio
    async def test_select_has_no_side_effect(self, registry, router):
        agent = await registry.register(make_profile("coder", ["coding"]))

        await router.select(Task(description="x", required_skills=["coding"]))

        assert agent.pending_tasks == 0

    @pytest.mark.asyncio
    async def test_skill_match_is_case_sensitive(self, registry, router):
        await registry.register(make_profile("coder", ["coding"]))

        assert await router.route(Task(description="x", required_skills=["Coding"])) is None
