"""Development-environment collaborators.

Narrow interfaces for the two side channels the swarm talks to: the editor
process that displays broadcasts and evaluates expressions, and the speech
synthesizer. Each has a subprocess-backed adapter and a null implementation.
"""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from swarm.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Outcome of an environment command."""

    success: bool
    output: str = ""
    error: str | None = None


@runtime_checkable
class EnvironmentBridge(Protocol):
    """Channel to the development environment."""

    async def execute(self, expression: str) -> CommandResult:
        """Evaluate an expression inside the environment."""
        ...

    async def push(self, text: str) -> bool:
        """Display a line of text; never raises."""
        ...


@runtime_checkable
class VoiceOutput(Protocol):
    """Text-to-speech output."""

    async def speak(self, text: str, voice: str, rate: int) -> bool:
        """Start speaking ``text``; never raises."""
        ...


async def reap(process: asyncio.subprocess.Process) -> None:
    """Kill a child that is still running and wait for it to exit."""
    if process.returncode is not None:
        return
    with contextlib.suppress(ProcessLookupError):
        process.kill()
    await process.wait()


async def run_command(*argv: str, timeout: float) -> CommandResult:
    """Run a command, capturing stdout, killing it after ``timeout`` seconds."""
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        return CommandResult(success=False, error=f"{argv[0]} unavailable: {e}")

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        return CommandResult(success=False, error="timeout")
    finally:
        # Also reached when the caller is cancelled mid-command
        await reap(process)

    if process.returncode != 0:
        return CommandResult(
            success=False,
            output=stdout.decode(errors="replace").strip(),
            error=stderr.decode(errors="replace").strip() or f"exit status {process.returncode}",
        )
    return CommandResult(success=True, output=stdout.decode(errors="replace").strip())


def elisp_string(text: str) -> str:
    """Quote text as an Emacs Lisp string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class EmacsClientBridge:
    """Talks to a running Emacs server through ``emacsclient --eval``."""

    def __init__(
        self,
        timeout: float = 10.0,
        executable: str = "emacsclient",
        push_template: str = '(message "%s" {text})',
    ) -> None:
        self._timeout = timeout
        self._executable = executable
        self._push_template = push_template

    async def execute(self, expression: str) -> CommandResult:
        return await run_command(self._executable, "--eval", expression, timeout=self._timeout)

    async def push(self, text: str) -> bool:
        result = await self.execute(self._push_template.format(text=elisp_string(text)))
        if not result.success:
            logger.debug("Environment push failed", error=result.error)
        return result.success


class NullBridge:
    """Bridge used when no environment is attached."""

    async def execute(self, expression: str) -> CommandResult:
        return CommandResult(success=False, error="no environment attached")

    async def push(self, text: str) -> bool:
        return False


class SayVoice:
    """Speaks through the macOS ``say`` command without waiting for it."""

    def __init__(self, executable: str = "say") -> None:
        self._executable = executable
        self._speaking: set[asyncio.Task[int]] = set()

    async def speak(self, text: str, voice: str, rate: int) -> bool:
        try:
            process = await asyncio.create_subprocess_exec(
                self._executable,
                "-v",
                voice,
                "-r",
                str(rate),
                text,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.debug("Speech unavailable", error=str(e))
            return False

        reaper = asyncio.create_task(process.wait())
        self._speaking.add(reaper)
        reaper.add_done_callback(self._speaking.discard)
        return True


class NullVoice:
    """Voice output that stays silent."""

    async def speak(self, text: str, voice: str, rate: int) -> bool:
        return False


def create_bridge(kind: str, timeout: float = 10.0) -> EnvironmentBridge:
    if kind == "emacs":
        return EmacsClientBridge(timeout=timeout)
    return NullBridge()


def create_voice(kind: str) -> VoiceOutput:
    if kind == "say":
        return SayVoice()
    return NullVoice()
