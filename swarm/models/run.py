"""Conversation run models.

A ConversationRun tracks one reasoning-service run through its lifecycle.
Status changes go through ``ConversationRun.transition`` so an illegal move,
in particular any move out of a terminal status, fails loudly.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from swarm.utils.exceptions import AuthError, RunStateError, TransportError

if TYPE_CHECKING:
    from swarm.utils.exceptions import SwarmError


class RunStatus(str, Enum):
    """Lifecycle status of a conversation run."""

    CREATED = "created"
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.TIMED_OUT})

# FAILED is reachable from every non-terminal status: an aborted cycle
# (credential or transport failure) closes its run instead of leaving it open.
ALLOWED_TRANSITIONS: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.CREATED: frozenset({RunStatus.QUEUED, RunStatus.FAILED, RunStatus.TIMED_OUT}),
    RunStatus.QUEUED: frozenset({RunStatus.IN_PROGRESS, RunStatus.FAILED, RunStatus.TIMED_OUT}),
    RunStatus.IN_PROGRESS: frozenset(
        {
            RunStatus.REQUIRES_ACTION,
            RunStatus.COMPLETED,
            RunStatus.FAILED,
            RunStatus.TIMED_OUT,
        }
    ),
    RunStatus.REQUIRES_ACTION: frozenset(
        {RunStatus.IN_PROGRESS, RunStatus.FAILED, RunStatus.TIMED_OUT}
    ),
    RunStatus.COMPLETED: frozenset(),
    RunStatus.FAILED: frozenset(),
    RunStatus.TIMED_OUT: frozenset(),
}


class ConversationRun(BaseModel):
    """One run of the reasoning service on behalf of an agent."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: str = Field(..., description="Role of the owning agent")
    session_id: str | None = None
    run_id: str | None = None
    status: RunStatus = RunStatus.CREATED
    history: list[RunStatus] = Field(default_factory=lambda: [RunStatus.CREATED])
    poll_attempts: int = 0
    invocations_resolved: int = 0
    failure_reason: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None

    model_config = {"extra": "forbid"}

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def can_transition(self, target: RunStatus) -> bool:
        return target == self.status or target in ALLOWED_TRANSITIONS[self.status]

    def transition(self, target: RunStatus, reason: str | None = None) -> None:
        """Move the run to ``target``.

        Re-entering the current status is a no-op.

        Raises:
            RunStateError: If the move is not allowed from the current status.
        """
        if target == self.status:
            return
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise RunStateError(self.run_id, self.status.value, target.value)

        self.status = target
        self.history.append(target)
        if reason:
            self.failure_reason = reason
        if target.is_terminal:
            self.finished_at = datetime.now(UTC)


@dataclass
class RunOutcome:
    """What a think cycle produced.

    ``output`` is the final assistant text for completed runs; ``error`` holds
    the error behind a failed run: a ServiceFailure, AuthError or TransportError,
    or a plain SwarmError wrapping an unexpected exception.
    """

    run: ConversationRun
    output: str | None = None
    error: SwarmError | None = None

    @property
    def status(self) -> RunStatus:
        return self.run.status

    @property
    def succeeded(self) -> bool:
        return self.run.status == RunStatus.COMPLETED

    @property
    def aborted(self) -> bool:
        """True when the cycle stopped on a credential or transport error."""
        return isinstance(self.error, (AuthError, TransportError))

    def summary(self) -> str:
        """Human-readable one-liner used in broadcasts."""
        role = self.run.role.upper()
        if self.run.status == RunStatus.COMPLETED:
            return f"{role} completed its thinking"
        if self.run.status == RunStatus.TIMED_OUT:
            return f"{role} thinking timed out after {self.run.poll_attempts} polls"
        reason = self.run.failure_reason or (self.error.message if self.error else "unknown error")
        return f"{role} failed: {reason}"
