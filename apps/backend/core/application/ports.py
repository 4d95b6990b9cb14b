"""
Port Definitions (Interfaces)

Ports are contracts that define how the application core interacts with external systems.
They are implemented by adapters in the adapters/ directory.

Following the Dependency Inversion Principle:
- Application core defines WHAT it needs (ports)
- Adapters implement HOW to provide it (concrete implementations)
- Core NEVER imports from adapters (dependency points inward)

All ports use Protocol (PEP 544) for structural subtyping.
"""

from typing import Protocol, Any, Callable, Optional
from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass

from apps.backend.core.domain.exchange import (
    Notification,
    RateConfiguration,
    Transaction,
    UserProfile,
)


# ============================================================================
# Event Bus Ports (Message-Driven Architecture)
# ============================================================================

@dataclass(frozen=True)
class DomainEvent:
    """
    Base class for all domain events.

    Domain events represent facts that have happened in the system.
    They are immutable and carry all necessary context.
    """
    event_id: str
    event_type: str
    timestamp: datetime
    aggregate_id: str  # ID of the entity that generated this event
    correlation_id: Optional[str] = None  # For tracing related events
    metadata: dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            object.__setattr__(self, 'metadata', {})


@dataclass(frozen=True)
class TransactionCreatedEvent(DomainEvent):
    """Event: A trade was submitted and is awaiting approval."""
    transaction_id: int = 0
    user_id: int = 0
    trade_type: str = ""
    amount: Decimal = Decimal("0")
    currency: str = ""


@dataclass(frozen=True)
class TransactionApprovedEvent(DomainEvent):
    """Event: An admin approved a pending trade."""
    transaction_id: int = 0
    user_id: int = 0
    approver_id: int = 0
    trade_type: str = ""
    amount: Decimal = Decimal("0")
    currency: str = ""
    loyalty_points_awarded: int = 0


@dataclass(frozen=True)
class KycSubmittedEvent(DomainEvent):
    """Event: A user uploaded a KYC document for review."""
    user_id: int = 0
    full_name: str = ""


@dataclass(frozen=True)
class UserRegisteredEvent(DomainEvent):
    """Event: A new account signed up."""
    user_id: int = 0
    full_name: str = ""
    email: str = ""


class MessageBusPort(Protocol):
    """
    Port for event-driven communication.

    Implementations:
    - InMemoryMessageBus: Synchronous, in-process delivery

    Design:
    - Fire-and-forget (no return value)
    - Handler failures never propagate to the publisher
    """

    def publish(
        self,
        event: DomainEvent,
        routing_key: Optional[str] = None,
    ) -> None:
        """Publish a domain event to every handler subscribed to its type."""
        ...

    def subscribe(
        self,
        event_type: str,
        handler: Callable[[DomainEvent], None],
        routing_pattern: Optional[str] = None,
    ) -> None:
        """
        Subscribe to events of a specific type.

        Note:
            Handlers must be idempotent (may receive duplicates).
        """
        ...


# ============================================================================
# Repository Ports (Data Persistence)
# ============================================================================

class TransactionRepository(Protocol):
    """Repository for exchange transactions."""

    def add(self, transaction: Transaction) -> Transaction:
        """Persist a new transaction and return it with its assigned ID."""
        ...

    def find_by_id(self, transaction_id: int) -> Optional[Transaction]:
        ...

    def list_for_user(self, user_id: int) -> list[Transaction]:
        """Transactions owned by a user, newest first."""
        ...

    def list_all(self) -> list[Transaction]:
        ...

    def mark_approved(
        self,
        transaction_id: int,
        approver_id: int,
        approved_at: datetime,
    ) -> Optional[Transaction]:
        """
        Atomically move a PENDING transaction to APPROVED.

        Returns:
            The updated transaction, or None if it was not PENDING
            (unknown ID or already approved). Of two concurrent callers
            at most one receives a transaction.
        """
        ...


class UserRepository(Protocol):
    """Read access to user profiles plus the loyalty-point side effect."""

    def get_profile(self, user_id: int) -> Optional[UserProfile]:
        ...

    def list_admin_ids(self) -> list[int]:
        ...

    def add_loyalty_points(self, user_id: int, points: int) -> None:
        ...

    def set_kyc_document(self, user_id: int, reference: str) -> None:
        """Attach a KYC document and reset KYC status to pending."""
        ...

    def approve_kyc(self, user_id: int) -> bool:
        """Returns False if the user does not exist."""
        ...


class RateConfigurationRepository(Protocol):
    """Platform rate configuration. Writes replace the whole configuration."""

    def get(self) -> RateConfiguration:
        ...

    def replace(self, config: RateConfiguration) -> RateConfiguration:
        ...


class NotificationRepository(Protocol):
    """Durable notification storage."""

    def add(self, notification: Notification) -> Notification:
        ...

    def list_for_user(self, user_id: int) -> list[Notification]:
        """Notifications for a recipient, newest first."""
        ...

    def mark_read(self, notification_id: int, user_id: int) -> bool:
        """Mark one notification read. Returns False if the user does not own it."""
        ...

    def mark_all_read(self, user_id: int) -> int:
        """Mark every notification for a user read. Returns rows changed."""
        ...


class DocumentStoragePort(Protocol):
    """Opaque storage for uploaded artifacts (payment proofs, KYC documents)."""

    def save(self, folder: str, filename: str, content: bytes) -> str:
        """Store content and return an opaque reference."""
        ...

    def open(self, reference: str) -> bytes:
        ...


# ============================================================================
# Live Delivery Port
# ============================================================================

class NotificationDeliveryPort(Protocol):
    """
    Best-effort real-time push to currently connected observers.

    Implementations:
    - ConnectionRegistry: In-process registry of connection handles
    """

    def deliver(self, user_id: int, payload: dict[str, Any]) -> int:
        """Push payload to every live connection of a user. Returns count delivered."""
        ...


# ============================================================================
# Time / Clock Port (for testing)
# ============================================================================

class ClockPort(Protocol):
    """
    Port for time operations (enables time travel in tests).

    Implementations:
    - SystemClock: Uses datetime.now(tz=utc)
    - FakeClock: Controllable time for testing
    """

    def now(self) -> datetime:
        """Get current time."""
        ...


# ============================================================================
# Unit of Work
# ============================================================================

class UnitOfWork(Protocol):
    """Groups repository writes into one atomic commit."""

    def __enter__(self) -> "UnitOfWork":
        ...

    def __exit__(self, exc_type, exc, tb) -> bool:
        ...


class NullUnitOfWork:
    """No-op unit of work for in-memory repositories."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False
