"""Built-in capability handlers.

Everything an agent can do to its surroundings: evaluate an environment
expression, read and write files inside the workspace, speak, broadcast to
the team and take a quick look at the codebase. Skill capabilities are
acknowledged and announced on the broadcast bus.
"""

from __future__ import annotations

import asyncio
import json
import random
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from swarm.core.capabilities import CapabilityHandler, CapabilityRegistry
from swarm.core.message_bus import BroadcastBus
from swarm.core.style import next_seed, stylize
from swarm.environment.adapters import EnvironmentBridge, NullBridge, NullVoice, VoiceOutput
from swarm.models import AgentProfile, BroadcastKind, BroadcastMessage, CapabilitySpec
from swarm.utils.exceptions import CapabilityError
from swarm.utils.logging import get_logger

if TYPE_CHECKING:
    from swarm.agents.base import Agent

logger = get_logger(__name__)

CODE_SUFFIXES = frozenset({".py", ".js"})


def _string_params(**fields: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {name: {"type": "string", "description": desc} for name, desc in fields.items()},
        "required": list(fields),
    }


BUILTIN_SPECS: tuple[CapabilitySpec, ...] = (
    CapabilitySpec(
        name="execute_environment",
        description="Evaluate an expression in the development environment",
        parameters=_string_params(expression="Expression to evaluate"),
    ),
    CapabilitySpec(
        name="read_file",
        description="Read a text file from the workspace",
        parameters=_string_params(path="Path relative to the workspace"),
    ),
    CapabilitySpec(
        name="write_file",
        description="Write a text file in the workspace",
        parameters=_string_params(
            path="Path relative to the workspace",
            content="Full file content",
        ),
    ),
    CapabilitySpec(
        name="speak",
        description="Speak with the agent's personality",
        parameters=_string_params(text="What to say"),
    ),
    CapabilitySpec(
        name="coordinate_with_agents",
        description="Communicate with other agents",
        parameters=_string_params(message="Message for the team"),
    ),
    CapabilitySpec(
        name="analyze_codebase",
        description="Analyze the current codebase",
    ),
)

SKILL_SPECS: tuple[CapabilitySpec, ...] = (
    CapabilitySpec(name="write_code", description="Write code with best practices"),
    CapabilitySpec(name="debug_issue", description="Debug and fix code issues"),
    CapabilitySpec(name="refactor_code", description="Refactor code for better quality"),
    CapabilitySpec(name="design_architecture", description="Design system architecture"),
    CapabilitySpec(name="create_patterns", description="Create reusable patterns"),
    CapabilitySpec(name="profile_performance", description="Profile and measure performance"),
    CapabilitySpec(name="optimize_bottleneck", description="Optimize performance bottlenecks"),
    CapabilitySpec(name="research_topic", description="Research and analyze topics"),
    CapabilitySpec(name="document_findings", description="Document research findings"),
)


def _require_str(capability: str, arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise CapabilityError(capability, f"missing required argument: {key}")
    return value


class EnvironmentCapabilities:
    """Handlers bound to one bus, bridge, voice and workspace."""

    def __init__(
        self,
        bus: BroadcastBus,
        bridge: EnvironmentBridge | None = None,
        voice: VoiceOutput | None = None,
        workspace: str | Path = ".",
        read_limit: int = 2000,
        output_limit: int = 1000,
        profiles: Mapping[str, AgentProfile] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._bus = bus
        self._bridge = bridge or NullBridge()
        self._voice = voice or NullVoice()
        self._workspace = Path(workspace).resolve()
        self._read_limit = read_limit
        self._output_limit = output_limit
        self._profiles = dict(profiles or {})
        self._rng = rng or random.Random()

    @property
    def workspace(self) -> Path:
        return self._workspace

    def register(self, registry: CapabilityRegistry) -> None:
        """Register every built-in and skill capability."""
        handlers: dict[str, CapabilityHandler] = {
            "execute_environment": self.execute_environment,
            "read_file": self.read_file,
            "write_file": self.write_file,
            "speak": self.speak_handler,
            "coordinate_with_agents": self.coordinate,
            "analyze_codebase": self.analyze_codebase,
        }
        for spec in BUILTIN_SPECS:
            registry.register(spec, handlers[spec.name])
        for spec in SKILL_SPECS:
            registry.register(spec, self.acknowledge(spec.name))

    # ------------------------------------------------------------------
    # Speech and relay
    # ------------------------------------------------------------------

    async def speak(self, agent: Agent, text: str) -> str:
        """Stylize, broadcast and voice ``text`` for ``agent``.

        Returns:
            The stylized text.
        """
        styled = stylize(agent.role, text, next_seed(self._rng), self._profiles)
        await self._bus.publish(
            BroadcastMessage(sender=agent.role, kind=BroadcastKind.SPEECH, text=styled)
        )
        voice = agent.profile.voice
        await self._voice.speak(styled, voice.voice, voice.rate)
        return styled

    async def relay(self, message: BroadcastMessage) -> None:
        """Bus subscriber forwarding every broadcast to the environment."""
        await self._bridge.push(message.format())

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def execute_environment(self, agent: Agent, arguments: dict[str, Any]) -> dict[str, Any]:
        expression = _require_str("execute_environment", arguments, "expression")
        result = await self._bridge.execute(expression)
        if not result.success:
            raise CapabilityError("execute_environment", f"environment command failed: {result.error}")
        return {"output": result.output[: self._output_limit]}

    async def read_file(self, agent: Agent, arguments: dict[str, Any]) -> dict[str, Any]:
        path = self._resolve("read_file", _require_str("read_file", arguments, "path"))
        try:
            content = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise CapabilityError("read_file", f"file not found: {arguments['path']}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise CapabilityError("read_file", f"cannot read {arguments['path']}: {e}") from e
        return {
            "path": str(path.relative_to(self._workspace)),
            "content": content[: self._read_limit],
            "truncated": len(content) > self._read_limit,
        }

    async def write_file(self, agent: Agent, arguments: dict[str, Any]) -> dict[str, Any]:
        path = self._resolve("write_file", _require_str("write_file", arguments, "path"))
        content = arguments.get("content")
        if not isinstance(content, str):
            raise CapabilityError("write_file", "missing required argument: content")

        def _write() -> int:
            path.parent.mkdir(parents=True, exist_ok=True)
            return path.write_text(content, encoding="utf-8")

        try:
            written = await asyncio.to_thread(_write)
        except OSError as e:
            raise CapabilityError("write_file", f"cannot write {arguments['path']}: {e}") from e

        logger.info("File written", role=agent.role, path=str(path), chars=written)
        return {"path": str(path.relative_to(self._workspace)), "written": written}

    async def speak_handler(self, agent: Agent, arguments: dict[str, Any]) -> dict[str, Any]:
        text = _require_str("speak", arguments, "text")
        return {"spoken": await self.speak(agent, text)}

    async def coordinate(self, agent: Agent, arguments: dict[str, Any]) -> dict[str, Any]:
        message = _require_str("coordinate_with_agents", arguments, "message")
        await self._bus.publish(
            BroadcastMessage(sender=agent.role, kind=BroadcastKind.COORDINATION, text=message)
        )
        return {"coordination": "message broadcasted"}

    async def analyze_codebase(self, agent: Agent, arguments: dict[str, Any]) -> dict[str, Any]:
        def _count() -> int:
            return sum(
                1 for entry in self._workspace.iterdir() if entry.is_file() and entry.suffix in CODE_SUFFIXES
            )

        try:
            count = await asyncio.to_thread(_count)
        except OSError as e:
            raise CapabilityError("analyze_codebase", f"cannot list workspace: {e}") from e
        return {"analysis": f"Found {count} code files", "code_files": count}

    def acknowledge(self, name: str) -> CapabilityHandler:
        """Handler that announces a skill capability and echoes its arguments."""

        async def handler(agent: Agent, arguments: dict[str, Any]) -> dict[str, Any]:
            await self._bus.publish(
                BroadcastMessage(
                    sender=agent.role,
                    kind=BroadcastKind.ACTION,
                    text=f"{agent.role.upper()} executing: {name}",
                    metadata={"capability": name, "arguments": arguments},
                )
            )
            rendered = json.dumps(arguments, ensure_ascii=False, default=str)
            return {"result": f"{name} executed with args: {rendered}"}

        handler.__name__ = f"acknowledge_{name}"
        return handler

    def _resolve(self, capability: str, relative: str) -> Path:
        path = (self._workspace / relative).resolve()
        if not path.is_relative_to(self._workspace):
            raise CapabilityError(capability, f"path escapes workspace: {relative}")
        return path
