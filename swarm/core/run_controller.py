"""Run Controller - drives one conversation run to a terminal status.

A think cycle opens a session, starts a run with the agent's capability
manifest, then polls: capability requests are dispatched and answered in one
batch, a completed run yields the latest assistant message, a failed run
yields the service's reason, and an exhausted poll budget times the run out.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from swarm.agents.base import Agent
from swarm.core.capabilities import CapabilityDispatcher, CapabilityRegistry
from swarm.models import CapabilityResult, ConversationRun, RunOutcome, RunStatus
from swarm.service.base import ReasoningService, RunStatusReport, ServiceMessage
from swarm.utils.exceptions import AuthError, ServiceFailure, SwarmError, TransportError
from swarm.utils.logging import get_run_logger, set_correlation_id

NO_RESPONSE = "No response"

# Service-side statuses that end a run as failed
SERVICE_FAILED_STATUSES = frozenset({"failed", "cancelled", "expired", "incomplete"})

Sleep = Callable[[float], Awaitable[None]]


class RunController:
    """Owns the state machine of conversation runs."""

    def __init__(
        self,
        service: ReasoningService,
        dispatcher: CapabilityDispatcher,
        capabilities: CapabilityRegistry,
        poll_interval: float = 2.0,
        max_attempts: int = 30,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize the controller.

        Args:
            service: Reasoning-service boundary.
            dispatcher: Resolves capability invocations.
            capabilities: Source of the tool definitions sent with each run.
            poll_interval: Seconds between status polls.
            max_attempts: Polls before the run is timed out.
            sleep: Awaitable used between polls.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._service = service
        self._dispatcher = dispatcher
        self._capabilities = capabilities
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._sleep = sleep

    @property
    def service(self) -> ReasoningService:
        return self._service

    async def run(self, agent: Agent, prompt: str) -> RunOutcome:
        """Execute one think cycle for ``agent``.

        Every failure closes the run as failed and is returned on the outcome
        rather than raised. Credential and transport errors are kept as is;
        anything else is wrapped in a ``SwarmError``.
        """
        run = ConversationRun(role=agent.role)
        log = get_run_logger(agent.role)

        try:
            session_id = await self._service.create_session(prompt)
            run.session_id = session_id
            set_correlation_id(session_id)
            log = log.bind(session_id=session_id)
            run.transition(RunStatus.QUEUED)

            manifest = self._capabilities.manifest(agent.capabilities)
            run_id = await self._service.start_run(session_id, manifest)
            run.run_id = run_id
            run.transition(RunStatus.IN_PROGRESS)
            log.info("Run started", run_id=run_id, capabilities=len(manifest))

            outcome = await self._poll(agent, run, session_id, run_id)
        except (AuthError, TransportError) as e:
            self._close_failed(run, e.message)
            log.warning(
                "Think cycle aborted",
                run_id=run.run_id,
                error=e.__class__.__name__,
                message=e.message,
            )
            return RunOutcome(run=run, error=e)
        except Exception as e:
            reason = f"unexpected error: {e}"
            self._close_failed(run, reason)
            log.exception("Think cycle crashed", run_id=run.run_id)
            return RunOutcome(run=run, error=SwarmError(reason, cause=e))

        log.info(
            "Run finished",
            run_id=run.run_id,
            status=outcome.status.value,
            polls=run.poll_attempts,
            invocations=run.invocations_resolved,
        )
        return outcome

    @staticmethod
    def _close_failed(run: ConversationRun, reason: str) -> None:
        if not run.is_terminal:
            run.transition(RunStatus.FAILED, reason=reason)

    async def _poll(
        self,
        agent: Agent,
        run: ConversationRun,
        session_id: str,
        run_id: str,
    ) -> RunOutcome:
        for attempt in range(1, self._max_attempts + 1):
            report = await self._service.get_run_status(session_id, run_id)
            run.poll_attempts = attempt

            if report.status == "requires_action":
                await self._resolve_invocations(agent, run, report, session_id, run_id)
            elif report.status == "completed":
                output = await self._final_output(session_id)
                run.transition(RunStatus.COMPLETED)
                return RunOutcome(run=run, output=output)
            elif report.status in SERVICE_FAILED_STATUSES:
                reason = report.last_error or f"run {report.status}"
                run.transition(RunStatus.FAILED, reason=reason)
                return RunOutcome(run=run, error=ServiceFailure(reason, report.error_code))

            if attempt < self._max_attempts:
                await self._sleep(self._poll_interval)

        run.transition(RunStatus.TIMED_OUT)
        return RunOutcome(run=run)

    async def _resolve_invocations(
        self,
        agent: Agent,
        run: ConversationRun,
        report: RunStatusReport,
        session_id: str,
        run_id: str,
    ) -> None:
        """Dispatch every invocation in order and submit all results at once."""
        run.transition(RunStatus.REQUIRES_ACTION)

        results: list[CapabilityResult] = []
        for invocation in report.invocations:
            results.append(await self._dispatcher.dispatch(agent, invocation))

        if results:
            await self._service.submit_outputs(session_id, run_id, results)
            run.invocations_resolved += len(results)

        run.transition(RunStatus.IN_PROGRESS)

    async def _final_output(self, session_id: str) -> str:
        messages = await self._service.list_messages(session_id)
        latest = latest_assistant_message(messages)
        return latest.text if latest and latest.text else NO_RESPONSE


def latest_assistant_message(messages: list[ServiceMessage]) -> ServiceMessage | None:
    """Newest assistant-authored message; on equal timestamps the first listed wins."""
    latest: ServiceMessage | None = None
    for message in messages:
        if message.role != "assistant":
            continue
        if latest is None or message.created_at > latest.created_at:
            latest = message
    return latest
