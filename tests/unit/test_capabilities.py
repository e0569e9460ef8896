"""Capability registry and dispatcher unit tests."""

import asyncio

import pytest
import pytest_asyncio

from swarm.core.capabilities import CapabilityDispatcher, CapabilityRegistry
from swarm.models import CapabilityInvocation, CapabilitySpec
from swarm.utils.exceptions import CapabilityError
from tests.helpers import make_profile


def invocation(name: str, arguments: str | None = "{}", call_id: str = "call_1") -> CapabilityInvocation:
    return CapabilityInvocation.from_raw_arguments(call_id, name, arguments)


class TestCapabilityRegistry:
    """Test CapabilityRegistry class."""

    def test_register_and_lookup(self):
        registry = CapabilityRegistry()

        async def handler(agent, arguments):
            return None

        registry.register(CapabilitySpec(name="speak", description="Say it"), handler)

        assert "speak" in registry
        assert registry.has_handler("speak")
        assert registry.get_handler("speak") is handler
        assert registry.get_spec("speak").description == "Say it"
        assert len(registry) == 1

    def test_register_by_name(self):
        """Test a bare name registers an advertised-only capability."""
        registry = CapabilityRegistry()

        registry.register("speak")

        assert "speak" in registry
        assert not registry.has_handler("speak")

    def test_duplicate_rejected(self):
        registry = CapabilityRegistry()
        registry.register("speak")

        with pytest.raises(ValueError, match="already registered"):
            registry.register("speak")

    def test_replace(self):
        """Test replace swaps the definition and drops the old handler."""
        registry = CapabilityRegistry()

        async def handler(agent, arguments):
            return None

        registry.register("speak", handler)
        registry.register(CapabilitySpec(name="speak", description="new"), replace=True)

        assert registry.get_spec("speak").description == "new"
        assert not registry.has_handler("speak")

    def test_manifest_keeps_order_and_fills_gaps(self):
        """Test manifest order and fallback specs."""
        registry = CapabilityRegistry()
        registry.register(CapabilitySpec(name="read_file", description="Read"))

        manifest = registry.manifest(["write_code", "read_file"])

        assert [spec.name for spec in manifest] == ["write_code", "read_file"]
        assert manifest[0].description == ""
        assert manifest[1].description == "Read"


class TestCapabilityDispatcher:
    """Test CapabilityDispatcher failure modes."""

    @pytest_asyncio.fixture
    async def agent(self, registry):
        return await registry.register(make_profile("coder", ["coding"]))

    @pytest.mark.asyncio
    async def test_success(self, dispatcher, agent):
        """Test a handler payload becomes a successful result."""
        result = await dispatcher.dispatch(agent, invocation("read_file", '{"path": "a.py"}'))

        assert result.success
        assert result.invocation_id == "call_1"
        assert result.payload == {"role": "coder", "arguments": {"path": "a.py"}}

    @pytest.mark.asyncio
    async def test_unsupported_capability(self, dispatcher, agent):
        """Test names outside the manifest fail without calling a handler."""
        result = await dispatcher.dispatch(agent, invocation("unknown_tool"))

        assert not result.success
        assert result.error == "unsupported capability: unknown_tool"

    @pytest.mark.asyncio
    async def test_capability_outside_manifest(self, dispatcher, agent):
        """Test a registered capability the agent's skills do not grant."""
        result = await dispatcher.dispatch(agent, invocation("research_topic"))

        assert result.error == "unsupported capability: research_topic"

    @pytest.mark.asyncio
    async def test_missing_handler(self, agent):
        dispatcher = CapabilityDispatcher(CapabilityRegistry())

        result = await dispatcher.dispatch(agent, invocation("speak"))

        assert not result.success
        assert result.error == "no handler registered for capability: speak"

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, dispatcher, agent):
        result = await dispatcher.dispatch(agent, invocation("read_file", "[1]"))

        assert not result.success
        assert result.error == "invalid arguments for read_file: expected an object, got list"

    @pytest.mark.asyncio
    async def test_capability_error(self, capability_registry, agent):
        """Test a handler-reported failure keeps its message."""

        async def refuse(agent, arguments):
            raise CapabilityError("read_file", "file not found: a.py")

        capability_registry.register("read_file", refuse, replace=True)
        dispatcher = CapabilityDispatcher(capability_registry)

        result = await dispatcher.dispatch(agent, invocation("read_file"))

        assert result.error == "file not found: a.py"

    @pytest.mark.asyncio
    async def test_unexpected_exception(self, capability_registry, agent):
        async def crash(agent, arguments):
            raise RuntimeError("disk on fire")

        capability_registry.register("write_file", crash, replace=True)
        dispatcher = CapabilityDispatcher(capability_registry)

        result = await dispatcher.dispatch(agent, invocation("write_file"))

        assert result.error == "write_file failed: disk on fire"

    @pytest.mark.asyncio
    async def test_timeout(self, capability_registry, agent):
        """Test a slow handler is cut off and reported."""

        async def hang(agent, arguments):
            await asyncio.sleep(10)

        capability_registry.register("speak", hang, replace=True)
        dispatcher = CapabilityDispatcher(capability_registry, handler_timeout=0.01)

        result = await dispatcher.dispatch(agent, invocation("speak"))

        assert result.error == "speak timed out after 0.01s"

    @pytest.mark.asyncio
    async def test_handler_gets_copy_of_arguments(self, capability_registry, agent):
        seen = []

        async def mutate(agent, arguments):
            arguments["extra"] = True
            seen.append(arguments)

        capability_registry.register("speak", mutate, replace=True)
        dispatcher = CapabilityDispatcher(capability_registry)
        call = invocation("speak", '{"text": "hi"}')

        await dispatcher.dispatch(agent, call)

        assert call.arguments == {"text": "hi"}
        assert seen == [{"text": "hi", "extra": True}]
