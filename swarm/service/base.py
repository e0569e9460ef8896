"""Reasoning service interface.

This module defines the abstract boundary the run controller talks to. The
HTTP implementation lives in ``swarm.service.client``; tests substitute a
scripted fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from swarm.models import CapabilityInvocation, CapabilityResult, CapabilitySpec


@dataclass
class RunStatusReport:
    """One status poll as reported by the service."""

    status: str
    invocations: list[CapabilityInvocation] = field(default_factory=list)
    last_error: str | None = None
    error_code: str | None = None
    raw_response: Any = None


@dataclass
class ServiceMessage:
    """A message of a session."""

    role: str
    text: str
    created_at: int = 0


class ReasoningService(ABC):
    """Abstract reasoning-service boundary.

    Every method may raise ``AuthError`` when the credential is denied and
    ``TransportError`` on network failures or non-success responses.
    """

    @abstractmethod
    async def create_session(self, initial_message: str) -> str:
        """Open a session seeded with one user message.

        Returns:
            The session id.
        """
        pass

    @abstractmethod
    async def start_run(
        self,
        session_id: str,
        manifest: Sequence[CapabilitySpec],
    ) -> str:
        """Start a run on a session, advertising the given capabilities.

        Returns:
            The run id.
        """
        pass

    @abstractmethod
    async def get_run_status(self, session_id: str, run_id: str) -> RunStatusReport:
        """Fetch the current status of a run."""
        pass

    @abstractmethod
    async def submit_outputs(
        self,
        session_id: str,
        run_id: str,
        results: Sequence[CapabilityResult],
    ) -> None:
        """Submit the results of every pending invocation in one batch."""
        pass

    @abstractmethod
    async def list_messages(self, session_id: str) -> list[ServiceMessage]:
        """List the messages of a session."""
        pass

    async def close(self) -> None:
        """Release any resources held by the service client."""
        return None
