"""
In-memory implementations of every engine port, plus factories for
rates and user profiles.
"""

import itertools
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from apps.backend.core.domain.exchange import (
    CliqType,
    KycStatus,
    Network,
    Notification,
    RateConfiguration,
    Transaction,
    TransactionStatus,
    UserProfile,
)
from apps.backend.core.application.ports import DomainEvent


PNG_BYTES = bytes.fromhex("89504e470d0a1a0a") + b"\x00" * 32
PDF_BYTES = b"%PDF-1.4\n%test document\n%%EOF"
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16 + b"\xff\xd9"


# ============================================================================
# Test Doubles
# ============================================================================

class FakeClock:
    """Controllable clock; each call to now() advances one second."""

    def __init__(self, start: Optional[datetime] = None):
        self.current = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


class InMemoryTransactionRepository:
    def __init__(self):
        self._rows: dict[int, Transaction] = {}
        self._ids = itertools.count(1)

    def add(self, transaction: Transaction) -> Transaction:
        saved = replace(transaction, id=next(self._ids))
        self._rows[saved.id] = saved
        return saved

    def find_by_id(self, transaction_id: int) -> Optional[Transaction]:
        return self._rows.get(transaction_id)

    def list_for_user(self, user_id: int) -> list[Transaction]:
        rows = [t for t in self._rows.values() if t.user_id == user_id]
        return sorted(rows, key=lambda t: (t.created_at, t.id), reverse=True)

    def list_all(self) -> list[Transaction]:
        return list(self._rows.values())

    def mark_approved(self, transaction_id, approver_id, approved_at):
        current = self._rows.get(transaction_id)
        if current is None or current.status != TransactionStatus.PENDING:
            return None
        approved = current.mark_as_approved(approved_at, approver_id)
        self._rows[transaction_id] = approved
        return approved


class InMemoryUserRepository:
    def __init__(self, *profiles: UserProfile):
        self.profiles = {p.id: p for p in profiles}
        self.kyc_documents: dict[int, str] = {}

    def add(self, profile: UserProfile) -> UserProfile:
        self.profiles[profile.id] = profile
        return profile

    def get_profile(self, user_id: int) -> Optional[UserProfile]:
        return self.profiles.get(user_id)

    def list_admin_ids(self) -> list[int]:
        return sorted(p.id for p in self.profiles.values() if p.is_admin)

    def add_loyalty_points(self, user_id: int, points: int) -> None:
        profile = self.profiles[user_id]
        self.profiles[user_id] = replace(profile, loyalty_points=profile.loyalty_points + points)

    def set_kyc_document(self, user_id: int, reference: str) -> None:
        self.kyc_documents[user_id] = reference
        self.profiles[user_id] = replace(self.profiles[user_id], kyc_status=KycStatus.PENDING)

    def approve_kyc(self, user_id: int) -> bool:
        if user_id not in self.profiles:
            return False
        self.profiles[user_id] = replace(self.profiles[user_id], kyc_status=KycStatus.APPROVED)
        return True


class InMemoryRateRepository:
    def __init__(self, config: RateConfiguration):
        self.config = config

    def get(self) -> RateConfiguration:
        return self.config

    def replace(self, config: RateConfiguration) -> RateConfiguration:
        self.config = config
        return config


class InMemoryNotificationRepository:
    def __init__(self):
        self.rows: dict[int, Notification] = {}
        self._ids = itertools.count(1)

    def add(self, notification: Notification) -> Notification:
        saved = replace(notification, id=next(self._ids))
        self.rows[saved.id] = saved
        return saved

    def list_for_user(self, user_id: int) -> list[Notification]:
        rows = [n for n in self.rows.values() if n.user_id == user_id]
        return sorted(rows, key=lambda n: (n.created_at, n.id), reverse=True)

    def mark_read(self, notification_id: int, user_id: int) -> bool:
        row = self.rows.get(notification_id)
        if row is None or row.user_id != user_id:
            return False
        self.rows[notification_id] = replace(row, read=True)
        return True

    def mark_all_read(self, user_id: int) -> int:
        changed = 0
        for key, row in list(self.rows.items()):
            if row.user_id == user_id and not row.read:
                self.rows[key] = replace(row, read=True)
                changed += 1
        return changed


class InMemoryDocumentStorage:
    def __init__(self):
        self.files: dict[str, bytes] = {}

    def save(self, folder: str, filename: str, content: bytes) -> str:
        reference = f"{folder}/{len(self.files) + 1}_{filename}"
        self.files[reference] = content
        return reference

    def open(self, reference: str) -> bytes:
        return self.files[reference]


class FakeMessageBus:
    """Records published events; optionally forwards them to subscribers."""

    def __init__(self):
        self.published_events: list[DomainEvent] = []
        self._handlers: dict[str, list] = {}

    def publish(self, event: DomainEvent, routing_key: Optional[str] = None) -> None:
        self.published_events.append(event)
        for handler in self._handlers.get(event.event_type, []):
            handler(event)

    def subscribe(self, event_type: str, handler, routing_pattern: Optional[str] = None) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def events_of(self, event_type: str) -> list[DomainEvent]:
        return [e for e in self.published_events if e.event_type == event_type]


class RecordingConnection:
    def __init__(self):
        self.received: list[dict] = []

    def send(self, payload: dict) -> None:
        self.received.append(payload)


class BrokenConnection:
    def send(self, payload: dict) -> None:
        raise ConnectionError("socket closed")


# ============================================================================
# Factories
# ============================================================================

def make_rates(**overrides) -> RateConfiguration:
    values = dict(
        buy_rate=Decimal("0.71"),
        buy_commission_rate=Decimal("0.02"),
        sell_rate=Decimal("0.69"),
        sell_commission_rate=Decimal("0.02"),
        usdt_address_trc20="TPlatformTrc20Address",
        usdt_address_bep20="0xPlatformBep20Address",
        cliq_alias="SARRAF",
    )
    values.update(overrides)
    return RateConfiguration(**values)


def make_profile(user_id: int = 1, **overrides) -> UserProfile:
    """A fully verified user with both settlement accounts configured."""
    values = dict(
        id=user_id,
        username=f"user{user_id}",
        full_name=f"User {user_id}",
        mobile_verified=True,
        kyc_status=KycStatus.APPROVED,
        usdt_address="TUserWalletAddress",
        usdt_network=Network.TRC20,
        cliq_type=CliqType.ALIAS,
        cliq_alias="AHMAD1",
    )
    values.update(overrides)
    return UserProfile(**values)


def make_admin(user_id: int = 100) -> UserProfile:
    return UserProfile(id=user_id, username=f"admin{user_id}", role="admin", full_name="Admin")


