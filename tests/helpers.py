"""Test doubles and factories shared by the unit and integration tests."""

import asyncio
import json
from collections.abc import Sequence
from typing import Any

from swarm.environment.adapters import CommandResult
from swarm.models import (
    AgentProfile,
    CapabilityInvocation,
    CapabilityResult,
    CapabilitySpec,
)
from swarm.service.base import ReasoningService, RunStatusReport, ServiceMessage


def make_profile(role: str, skills: Sequence[str], interval: float = 60.0, **kwargs: Any) -> AgentProfile:
    """Build a profile with sensible test defaults."""
    kwargs.setdefault("instructions", f"You are the {role.upper()} agent.")
    return AgentProfile(role=role, skills=list(skills), think_interval_seconds=interval, **kwargs)


def requires_action(*calls: tuple[str, str, Any]) -> RunStatusReport:
    """A ``requires_action`` report; arguments may be a dict or a raw string."""
    invocations = []
    for call_id, name, arguments in calls:
        raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
        invocations.append(CapabilityInvocation.from_raw_arguments(call_id, name, raw))
    return RunStatusReport(status="requires_action", invocations=invocations)


def status(name: str, last_error: str | None = None, error_code: str | None = None) -> RunStatusReport:
    return RunStatusReport(status=name, last_error=last_error, error_code=error_code)


class ScriptedService(ReasoningService):
    """Reasoning service that replays a fixed status script.

    Each poll consumes the next report; the last one repeats forever. Every
    call is recorded so tests can assert on the exact protocol.
    """

    def __init__(
        self,
        statuses: Sequence[RunStatusReport] | None = None,
        messages: Sequence[ServiceMessage] | None = None,
        fail_on: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self.statuses = list(statuses or [status("completed")])
        self.messages = list(
            messages if messages is not None else [ServiceMessage(role="assistant", text="Done", created_at=1)]
        )
        self.fail_on = fail_on
        self.error = error
        self.gate: asyncio.Event | None = None
        self.sessions: list[str] = []
        self.runs: list[tuple[str, list[str]]] = []
        self.polls = 0
        self.submissions: list[tuple[int, list[CapabilityResult]]] = []
        self.closed = False

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation and self.error is not None:
            raise self.error

    async def create_session(self, initial_message: str) -> str:
        if self.gate is not None:
            await self.gate.wait()
        self._maybe_fail("create_session")
        self.sessions.append(initial_message)
        return f"thread_{len(self.sessions)}"

    async def start_run(self, session_id: str, manifest: Sequence[CapabilitySpec]) -> str:
        self._maybe_fail("start_run")
        self.runs.append((session_id, [spec.name for spec in manifest]))
        return f"run_{len(self.runs)}"

    async def get_run_status(self, session_id: str, run_id: str) -> RunStatusReport:
        self._maybe_fail("get_run_status")
        self.polls += 1
        if len(self.statuses) > 1:
            return self.statuses.pop(0)
        return self.statuses[0]

    async def submit_outputs(
        self,
        session_id: str,
        run_id: str,
        results: Sequence[CapabilityResult],
    ) -> None:
        self._maybe_fail("submit_outputs")
        self.submissions.append((self.polls, list(results)))

    async def list_messages(self, session_id: str) -> list[ServiceMessage]:
        self._maybe_fail("list_messages")
        return list(self.messages)

    async def close(self) -> None:
        self.closed = True


class RecordingVoice:
    """Voice output that remembers what it was asked to say."""

    def __init__(self) -> None:
        self.spoken: list[tuple[str, str, int]] = []

    async def speak(self, text: str, voice: str, rate: int) -> bool:
        self.spoken.append((text, voice, rate))
        return True


class RecordingBridge:
    """Environment bridge that records pushes and replays one execution result."""

    def __init__(self, success: bool = True, output: str = "ok") -> None:
        self.pushed: list[str] = []
        self.executed: list[str] = []
        self._result = CommandResult(success=success, output=output, error=None if success else "boom")

    async def execute(self, expression: str) -> CommandResult:
        self.executed.append(expression)
        return self._result

    async def push(self, text: str) -> bool:
        self.pushed.append(text)
        return True


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that yields once and records delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


async def settle(scheduler: Any) -> None:
    """Wait until the scheduler has no think cycle in flight."""

    async def _wait() -> None:
        while scheduler.in_flight:
            await asyncio.sleep(0)

    await asyncio.wait_for(_wait(), timeout=1)


class SpawnRecorder:
    """Stand-in for ``asyncio.create_subprocess_exec`` that keeps every child.

    With ``argv`` set, that command is started instead of the requested one.
    """

    def __init__(self, argv: Sequence[str] | None = None) -> None:
        self.argv = argv
        self.processes: list[asyncio.subprocess.Process] = []
        self._spawn = asyncio.create_subprocess_exec

    async def __call__(self, *argv: str, **kwargs: Any) -> asyncio.subprocess.Process:
        process = await self._spawn(*(self.argv or argv), **kwargs)
        self.processes.append(process)
        return process

    async def wait_for_child(self) -> asyncio.subprocess.Process:
        async def _wait() -> None:
            while not self.processes:
                await asyncio.sleep(0.01)

        await asyncio.wait_for(_wait(), timeout=5)
        return self.processes[0]
