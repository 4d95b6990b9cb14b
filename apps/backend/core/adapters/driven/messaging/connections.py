"""
Live Connection Registry

Holds the currently connected observers (WebSocket consumers, SSE streams,
test doubles) per user and pushes notification payloads to them.

A connection is any object with a `send(payload: dict) -> None` method.
Observers may join or leave at any time; a connection whose `send` raises
is dropped from the registry and the failure is logged.

Implements NotificationDeliveryPort.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Protocol


logger = logging.getLogger(__name__)


class Connection(Protocol):
    def send(self, payload: dict[str, Any]) -> None:
        ...


class ConnectionRegistry:
    """Thread-safe registry of live connections keyed by user id."""

    def __init__(self):
        self._connections: Dict[int, List[Connection]] = {}
        self._lock = Lock()

    def register(self, user_id: int, connection: Connection) -> None:
        with self._lock:
            self._connections.setdefault(user_id, []).append(connection)
        logger.debug(f"Connection registered for user {user_id}")

    def unregister(self, user_id: int, connection: Connection) -> None:
        with self._lock:
            connections = self._connections.get(user_id)
            if not connections or connection not in connections:
                return
            connections.remove(connection)
            if not connections:
                del self._connections[user_id]
        logger.debug(f"Connection unregistered for user {user_id}")

    def connection_count(self, user_id: int) -> int:
        with self._lock:
            return len(self._connections.get(user_id, []))

    def deliver(self, user_id: int, payload: dict[str, Any]) -> int:
        """
        Send payload to every connection of user_id.

        Returns:
            Number of connections that accepted the payload (0 when offline)
        """
        with self._lock:
            connections = list(self._connections.get(user_id, ()))

        delivered = 0
        for connection in connections:
            try:
                connection.send(payload)
                delivered += 1
            except Exception as e:
                logger.warning(
                    f"Dropping connection for user {user_id} after send failure: {e}"
                )
                self.unregister(user_id, connection)
        return delivered
