"""Agent runtime handle.

An Agent wraps the profile it was registered with and carries the only state
that mutates while the swarm runs: the ``busy`` flag guarding its think cycle
and the queue of tasks waiting to be folded into its next prompt.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from swarm.models import AgentInfo, AgentProfile, AgentStatus, Task

if TYPE_CHECKING:
    from swarm.models import RunOutcome


class Agent:
    """A registered member of the swarm.

    Attributes:
        profile: The descriptor the agent was registered with.
        capabilities: Capability manifest, in advertisement order.
    """

    def __init__(self, profile: AgentProfile, capabilities: Iterable[str]) -> None:
        """Initialize the agent.

        Args:
            profile: Agent descriptor (role, skills, personality, schedule).
            capabilities: Names the agent may expose to the reasoning service.
        """
        self._profile = profile
        self._capabilities = tuple(dict.fromkeys(capabilities))
        self._busy = False
        self._pending: deque[Task] = deque()
        self._cycles = 0
        self._last_outcome: RunOutcome | None = None
        self._last_active: datetime | None = None

    @property
    def profile(self) -> AgentProfile:
        return self._profile

    @property
    def role(self) -> str:
        return self._profile.role

    @property
    def name(self) -> str:
        return self._profile.display_name

    @property
    def skills(self) -> tuple[str, ...]:
        return tuple(self._profile.skills)

    @property
    def capabilities(self) -> tuple[str, ...]:
        return self._capabilities

    @property
    def busy(self) -> bool:
        """True while a think cycle of this agent is in flight."""
        return self._busy

    @property
    def status(self) -> AgentStatus:
        return AgentStatus.BUSY if self._busy else AgentStatus.IDLE

    @property
    def pending_tasks(self) -> int:
        return len(self._pending)

    @property
    def last_outcome(self) -> RunOutcome | None:
        return self._last_outcome

    def has_skill(self, skill: str) -> bool:
        return skill in self._profile.skills

    def has_capability(self, name: str) -> bool:
        return name in self._capabilities

    # ------------------------------------------------------------------
    # Single-flight guard
    # ------------------------------------------------------------------

    def try_acquire(self) -> bool:
        """Claim the agent for one think cycle.

        Check and set happen without an intervening await, so two triggers
        on the same event loop can never both succeed.

        Returns:
            True if the caller now owns the cycle, False if one is in flight.
        """
        if self._busy:
            return False
        self._busy = True
        self._last_active = datetime.now(UTC)
        return True

    def release(self) -> None:
        """Clear the busy flag at the end of a cycle."""
        self._busy = False

    # ------------------------------------------------------------------
    # Task context
    # ------------------------------------------------------------------

    def assign(self, task: Task) -> None:
        """Queue a task for the agent's next think cycle."""
        self._pending.append(task)

    def next_task(self) -> Task | None:
        """Pop the oldest queued task, if any."""
        return self._pending.popleft() if self._pending else None

    def record_outcome(self, outcome: RunOutcome) -> None:
        self._cycles += 1
        self._last_outcome = outcome

    def info(self) -> AgentInfo:
        """Snapshot of the agent for the API and logs."""
        metadata: dict[str, Any] = {
            "cycles": self._cycles,
            "voice": self._profile.voice.voice,
        }
        if self._last_active:
            metadata["last_active"] = self._last_active.isoformat()
        if self._last_outcome is not None:
            metadata["last_status"] = self._last_outcome.status.value
        return AgentInfo(
            role=self.role,
            name=self.name,
            personality=self._profile.personality,
            skills=list(self.skills),
            capabilities=list(self._capabilities),
            status=self.status,
            pending_tasks=self.pending_tasks,
            think_interval_seconds=self._profile.think_interval_seconds,
            metadata=metadata,
        )

    def __repr__(self) -> str:
        return f"Agent(role={self.role!r}, busy={self._busy})"
