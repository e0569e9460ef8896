"""Broadcast Bus - fan-out channel for orchestration events.

Every published message is appended to a bounded history and delivered to
all subscribers. Delivery is best effort: a failing subscriber is logged and
never affects the publisher or the other subscribers.
"""

import asyncio
import uuid
from collections import deque
from collections.abc import Callable, Coroutine
from typing import Any

from swarm.models import BroadcastMessage
from swarm.utils.logging import get_logger

# Type alias for broadcast subscribers
BroadcastHandler = Callable[[BroadcastMessage], Coroutine[Any, Any, None]]

logger = get_logger(__name__)


class BroadcastBus:
    """In-memory broadcast log with subscribers."""

    def __init__(self, max_history: int = 1000):
        """Initialize the bus.

        Args:
            max_history: Messages kept in history; the oldest are dropped.
        """
        self._subscribers: dict[str, tuple[str, BroadcastHandler]] = {}
        self._history: deque[BroadcastMessage] = deque(maxlen=max_history)

    async def publish(self, message: BroadcastMessage) -> None:
        """Append to history, then deliver to every subscriber."""
        self._history.append(message)

        subscribers = list(self._subscribers.items())
        if subscribers:
            await asyncio.gather(
                *(self._deliver(sub_id, name, handler, message) for sub_id, (name, handler) in subscribers)
            )

    async def _deliver(
        self,
        subscription_id: str,
        name: str,
        handler: BroadcastHandler,
        message: BroadcastMessage,
    ) -> None:
        try:
            await handler(message)
        except Exception:
            logger.exception(
                "Broadcast delivery failed",
                subscriber=name,
                subscription_id=subscription_id,
                message_id=message.id,
            )

    def subscribe(self, handler: BroadcastHandler, name: str | None = None) -> str:
        """Register a subscriber.

        Returns:
            Subscription id, to pass to ``unsubscribe``.
        """
        subscription_id = str(uuid.uuid4())
        self._subscribers[subscription_id] = (name or getattr(handler, "__name__", "subscriber"), handler)
        return subscription_id

    def unsubscribe(self, subscription_id: str) -> bool:
        """Remove a subscriber.

        Returns:
            True if the subscription existed.
        """
        return self._subscribers.pop(subscription_id, None) is not None

    def history(
        self,
        limit: int | None = None,
        exclude_sender: str | None = None,
    ) -> list[BroadcastMessage]:
        """Messages in emission order, optionally the last ``limit`` only.

        Args:
            limit: Maximum number of (most recent) messages to return.
            exclude_sender: Drop messages from this sender before limiting.
        """
        messages = [m for m in self._history if exclude_sender is None or m.sender != exclude_sender]
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages

    @property
    def subscriber_count(self) -> int:
        """Return the number of subscribers."""
        return len(self._subscribers)

    @property
    def message_count(self) -> int:
        """Return the number of messages in history."""
        return len(self._history)
