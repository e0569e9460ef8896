"""Capability registry and dispatcher.

Handlers are coroutines ``handler(agent, arguments)`` returning a JSON-ready
payload; they signal failure by raising ``CapabilityError``. The dispatcher
turns every invocation into exactly one CapabilityResult, whatever the
handler does.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

from swarm.models import CapabilityInvocation, CapabilityResult, CapabilitySpec
from swarm.utils.exceptions import CapabilityError, UnsupportedCapability
from swarm.utils.logging import get_logger

if TYPE_CHECKING:
    from swarm.agents.base import Agent

CapabilityHandler = Callable[["Agent", dict[str, Any]], Awaitable[Any]]

logger = get_logger(__name__)


class CapabilityRegistry:
    """Maps capability names to their advertised spec and handler."""

    def __init__(self) -> None:
        self._specs: dict[str, CapabilitySpec] = {}
        self._handlers: dict[str, CapabilityHandler] = {}

    def register(
        self,
        spec: CapabilitySpec | str,
        handler: CapabilityHandler | None = None,
        *,
        replace: bool = False,
    ) -> None:
        """Register a capability.

        A spec without a handler is advertised but fails when invoked.

        Raises:
            ValueError: If the name is taken and ``replace`` is False.
        """
        if isinstance(spec, str):
            spec = CapabilitySpec(name=spec)
        if spec.name in self._specs and not replace:
            raise ValueError(f"Capability already registered: {spec.name}")
        self._specs[spec.name] = spec
        if handler is not None:
            self._handlers[spec.name] = handler
        else:
            self._handlers.pop(spec.name, None)

    def get_handler(self, name: str) -> CapabilityHandler | None:
        return self._handlers.get(name)

    def get_spec(self, name: str) -> CapabilitySpec | None:
        return self._specs.get(name)

    def manifest(self, names: Iterable[str]) -> list[CapabilitySpec]:
        """Tool definitions for the given names, in the given order.

        Names without a registered spec are advertised with an empty schema.
        """
        return [self._specs.get(name) or CapabilitySpec(name=name) for name in names]

    def names(self) -> list[str]:
        return list(self._specs)

    def has_handler(self, name: str) -> bool:
        return name in self._handlers

    def __contains__(self, name: str) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)


class CapabilityDispatcher:
    """Resolves capability invocations on behalf of an agent."""

    def __init__(self, registry: CapabilityRegistry, handler_timeout: float = 10.0) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Capability registry to look handlers up in.
            handler_timeout: Hard limit, in seconds, for one handler call.
        """
        self._registry = registry
        self._handler_timeout = handler_timeout

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    async def dispatch(self, agent: Agent, invocation: CapabilityInvocation) -> CapabilityResult:
        """Execute one invocation.

        Never raises for handler-side problems; every failure mode becomes a
        failed CapabilityResult so the surrounding batch always completes.
        """
        name = invocation.name

        if not agent.has_capability(name):
            error = UnsupportedCapability(name)
            logger.warning("Unsupported capability requested", role=agent.role, capability=name)
            return CapabilityResult.fail(invocation.id, error.message)

        handler = self._registry.get_handler(name)
        if handler is None:
            logger.warning("No handler for capability", role=agent.role, capability=name)
            return CapabilityResult.fail(invocation.id, f"no handler registered for capability: {name}")

        if invocation.arguments_error:
            return CapabilityResult.fail(
                invocation.id, f"invalid arguments for {name}: {invocation.arguments_error}"
            )

        logger.info("Executing capability", role=agent.role, capability=name, invocation_id=invocation.id)

        try:
            payload = await asyncio.wait_for(
                handler(agent, dict(invocation.arguments)), timeout=self._handler_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Capability timed out",
                role=agent.role,
                capability=name,
                timeout=self._handler_timeout,
            )
            return CapabilityResult.fail(
                invocation.id, f"{name} timed out after {self._handler_timeout:g}s"
            )
        except CapabilityError as e:
            logger.warning("Capability failed", role=agent.role, capability=name, error=e.message)
            return CapabilityResult.fail(invocation.id, e.message)
        except Exception as e:
            logger.exception("Capability handler raised", role=agent.role, capability=name)
            return CapabilityResult.fail(invocation.id, f"{name} failed: {e}")

        return CapabilityResult.ok(invocation.id, payload)
