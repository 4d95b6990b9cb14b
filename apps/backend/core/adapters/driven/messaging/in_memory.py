"""
In-Memory Message Bus Implementation

Synchronous, in-process delivery of ledger events (TransactionCreated,
TransactionApproved, KycSubmitted) to their subscribers.

Characteristics:
- Synchronous (publish returns once every handler has run)
- No persistence (subscribers must be registered before publish)
- Thread-safe registration (uses a lock)
- Handler failures are logged and never reach the publisher

Usage:
    bus = InMemoryMessageBus()
    bus.subscribe("TransactionApproved", dispatcher.on_transaction_approved)
    bus.publish(TransactionApprovedEvent(...))
"""

from typing import Callable, Dict, List, Optional
from threading import Lock
import logging

from apps.backend.core.application.ports import DomainEvent


logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class InMemoryMessageBus:
    """
    In-process message bus.

    Implements MessageBusPort.
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}
        self._lock = Lock()
        logger.debug("InMemoryMessageBus initialized")

    def publish(
        self,
        event: DomainEvent,
        routing_key: Optional[str] = None,
    ) -> None:
        """
        Publish event to every handler subscribed to its type.

        Args:
            event: Domain event to publish
            routing_key: Ignored (no routing logic in-process)

        Note:
            Handlers run in registration order against a snapshot of the
            subscriber list. A failing handler is logged; the rest still run.
        """
        event_type = event.event_type

        with self._lock:
            handlers = list(self._handlers.get(event_type, ()))

        if not handlers:
            logger.debug(f"No handlers registered for event type: {event_type}")
            return

        logger.info(f"Publishing {event_type} (ID: {event.event_id}) to {len(handlers)} handler(s)")

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Handler {_handler_name(handler)} failed for {event_type} "
                    f"(ID: {event.event_id}): {e}",
                    exc_info=True,
                )

    def subscribe(
        self,
        event_type: str,
        handler: Handler,
        routing_pattern: Optional[str] = None,
    ) -> None:
        """Register handler for event_type. routing_pattern is ignored."""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

        logger.debug(f"Subscribed {_handler_name(handler)} to {event_type}")

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return
        logger.warning(f"Handler {_handler_name(handler)} was not subscribed to {event_type}")

    def clear_all(self) -> None:
        """Drop every subscription (test cleanup)."""
        with self._lock:
            self._handlers.clear()

    def get_handler_count(self, event_type: str) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, []))
