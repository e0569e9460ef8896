"""Shared test fixtures."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from swarm.core.capabilities import CapabilityDispatcher, CapabilityRegistry
from swarm.core.message_bus import BroadcastBus
from swarm.core.registry import BASELINE_CAPABILITIES, SKILL_CAPABILITIES, AgentRegistry
from swarm.core.run_controller import RunController
from swarm.models import AgentProfile, CapabilitySpec, VoiceProfile, VoiceStyle
from swarm.utils.config import reset_config
from tests.helpers import ScriptedService, SleepRecorder, make_profile


@pytest.fixture(autouse=True)
def _reset_config():
    """Keep the process-wide configuration isolated between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def coder_profile() -> AgentProfile:
    return make_profile(
        "coder",
        ["coding", "debugging", "refactoring", "performance"],
        interval=30,
        voice=VoiceProfile(voice="Alex", rate=220, style=VoiceStyle.ENERGETIC),
    )


@pytest.fixture
def architect_profile() -> AgentProfile:
    return make_profile("architect", ["system design", "architecture patterns", "optimization"])


@pytest_asyncio.fixture
async def registry() -> AsyncGenerator[AgentRegistry, None]:
    """AgentRegistry fixture."""
    yield AgentRegistry()


@pytest.fixture
def bus() -> BroadcastBus:
    return BroadcastBus(max_history=100)


@pytest.fixture
def capability_registry() -> CapabilityRegistry:
    """Registry where every baseline and skill capability echoes its arguments."""
    capabilities = CapabilityRegistry()

    async def echo(agent, arguments):
        return {"role": agent.role, "arguments": arguments}

    names = list(BASELINE_CAPABILITIES) + [name for group in SKILL_CAPABILITIES.values() for name in group]
    for name in names:
        capabilities.register(CapabilitySpec(name=name), echo)
    return capabilities


@pytest.fixture
def dispatcher(capability_registry: CapabilityRegistry) -> CapabilityDispatcher:
    return CapabilityDispatcher(capability_registry, handler_timeout=1.0)


@pytest.fixture
def service() -> ScriptedService:
    return ScriptedService()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def controller(
    service: ScriptedService,
    dispatcher: CapabilityDispatcher,
    capability_registry: CapabilityRegistry,
    sleeper: SleepRecorder,
) -> RunController:
    """RunController over the scripted service, polling without real delays."""
    return RunController(
        service,
        dispatcher,
        capability_registry,
        poll_interval=2.0,
        max_attempts=30,
        sleep=sleeper,
    )
