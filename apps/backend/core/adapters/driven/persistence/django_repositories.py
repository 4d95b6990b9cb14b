"""
Django ORM repositories.

Implement the repository ports on top of the `api` and `clients` models.
Models are imported lazily so the core package stays importable without
a configured Django project.

Every DatabaseError is logged with context and re-raised as
PersistenceFailure; callers never see ORM exceptions.
"""

from __future__ import annotations

import functools
import logging
import threading
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F, Q

from apps.backend.core.domain.errors import PersistenceFailure
from apps.backend.core.domain.exchange import (
    CliqType,
    CurrencyBasis,
    Network,
    Notification,
    NotificationType,
    PaymentMethod,
    RateConfiguration,
    TradeType,
    Transaction,
    TransactionStatus,
    UserProfile,
)

logger = logging.getLogger(__name__)


def _persistence_guard(method):
    """Translate DatabaseError into PersistenceFailure."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except DatabaseError as e:
            logger.error(
                f"{type(self).__name__}.{method.__name__} failed: {e}",
                exc_info=True,
            )
            raise PersistenceFailure("A storage error occurred") from e

    return wrapper


def _enum_or_none(enum_cls, value):
    return enum_cls(value) if value else None


class DjangoTransactionRepository:
    """TransactionRepository backed by api.Transaction."""

    def __init__(self):
        from api.models import Transaction as DjangoTransaction  # lazy import

        self._Transaction = DjangoTransaction

    def _to_domain(self, m) -> Transaction:
        return Transaction(
            id=m.pk,
            user_id=m.user_id,
            type=TradeType(m.type),
            amount=m.amount,
            rate=m.rate,
            commission=m.commission,
            fee=m.fee,
            basis=CurrencyBasis(m.basis),
            final_amount=m.final_amount,
            status=TransactionStatus(m.status),
            proof_of_payment=m.proof_of_payment,
            created_at=m.created_at,
            network=_enum_or_none(Network, m.network),
            payment_method=_enum_or_none(PaymentMethod, m.payment_method),
            cliq_type=_enum_or_none(CliqType, m.cliq_type),
            cliq_alias=m.cliq_alias,
            cliq_number=m.cliq_number,
            approved_at=m.approved_at,
            approved_by=m.approved_by_id,
        )

    @_persistence_guard
    def add(self, txn: Transaction) -> Transaction:
        m = self._Transaction.objects.create(
            user_id=txn.user_id,
            type=txn.type.value,
            amount=txn.amount,
            rate=txn.rate,
            commission=txn.commission,
            fee=txn.fee,
            basis=txn.basis.value,
            final_amount=txn.final_amount,
            status=txn.status.value,
            proof_of_payment=txn.proof_of_payment,
            created_at=txn.created_at,
            network=txn.network.value if txn.network else None,
            payment_method=txn.payment_method.value if txn.payment_method else None,
            cliq_type=txn.cliq_type.value if txn.cliq_type else None,
            cliq_alias=txn.cliq_alias,
            cliq_number=txn.cliq_number,
        )
        return self._to_domain(m)

    @_persistence_guard
    def find_by_id(self, transaction_id: int) -> Optional[Transaction]:
        m = self._Transaction.objects.filter(pk=transaction_id).first()
        return self._to_domain(m) if m else None

    @_persistence_guard
    def list_for_user(self, user_id: int) -> list[Transaction]:
        qs = self._Transaction.objects.filter(user_id=user_id).order_by("-created_at", "-id")
        return [self._to_domain(m) for m in qs]

    @_persistence_guard
    def list_all(self) -> list[Transaction]:
        return [self._to_domain(m) for m in self._Transaction.objects.all()]

    @_persistence_guard
    def mark_approved(
        self,
        transaction_id: int,
        approver_id: int,
        approved_at: datetime,
    ) -> Optional[Transaction]:
        # Conditional update: only one concurrent caller can match PENDING
        updated = self._Transaction.objects.filter(
            pk=transaction_id,
            status=TransactionStatus.PENDING.value,
        ).update(
            status=TransactionStatus.APPROVED.value,
            approved_at=approved_at,
            approved_by_id=approver_id,
            updated_at=approved_at,
        )
        if not updated:
            return None
        return self._to_domain(self._Transaction.objects.get(pk=transaction_id))


class DjangoUserRepository:
    """UserRepository backed by clients.CustomUser."""

    def __init__(self):
        from django.contrib.auth import get_user_model  # lazy import

        self._User = get_user_model()

    @_persistence_guard
    def get_profile(self, user_id: int) -> Optional[UserProfile]:
        user = self._User.objects.filter(pk=user_id).first()
        return user.to_profile() if user else None

    @_persistence_guard
    def list_admin_ids(self) -> list[int]:
        qs = self._User.objects.filter(
            Q(role=self._User.ROLE_ADMIN) | Q(is_staff=True),
            is_active=True,
        ).order_by("pk")
        return list(qs.values_list("pk", flat=True))

    @_persistence_guard
    def add_loyalty_points(self, user_id: int, points: int) -> None:
        self._User.objects.filter(pk=user_id).update(
            loyalty_points=F("loyalty_points") + points
        )

    @_persistence_guard
    def set_kyc_document(self, user_id: int, reference: str) -> None:
        self._User.objects.filter(pk=user_id).update(
            kyc_document=reference,
            kyc_status="pending",
        )

    @_persistence_guard
    def approve_kyc(self, user_id: int) -> bool:
        return bool(self._User.objects.filter(pk=user_id).update(kyc_status="approved"))


class DjangoRateConfigurationRepository:
    """
    RateConfigurationRepository stored as api.PlatformSetting rows.

    Until an admin saves a configuration, missing keys come from
    settings.EXCHANGE["DEFAULT_RATES"].
    """

    def __init__(self, defaults: Optional[dict[str, str]] = None):
        from api.models import PlatformSetting  # lazy import

        self._Setting = PlatformSetting
        if defaults is None:
            defaults = getattr(settings, "EXCHANGE", {}).get("DEFAULT_RATES", {})
        self._defaults = {k: str(v) for k, v in defaults.items()}

    @_persistence_guard
    def get(self) -> RateConfiguration:
        stored = dict(self._Setting.objects.values_list("key", "value"))
        return RateConfiguration.from_settings(stored, self._defaults)

    @_persistence_guard
    def replace(self, config: RateConfiguration) -> RateConfiguration:
        with transaction.atomic():
            for key, value in config.to_settings().items():
                self._Setting.objects.update_or_create(key=key, defaults={"value": value})
        return config


class DjangoNotificationRepository:
    """NotificationRepository backed by api.Notification."""

    def __init__(self):
        from api.models import Notification as DjangoNotification  # lazy import

        self._Notification = DjangoNotification

    def _to_domain(self, m) -> Notification:
        return Notification(
            id=m.pk,
            user_id=m.user_id,
            type=NotificationType(m.type),
            message=m.message,
            related_id=m.related_id,
            created_at=m.created_at,
            read=m.read,
        )

    @_persistence_guard
    def add(self, notification: Notification) -> Notification:
        m = self._Notification.objects.create(
            user_id=notification.user_id,
            type=notification.type.value,
            message=notification.message,
            related_id=notification.related_id,
            created_at=notification.created_at,
            read=notification.read,
        )
        return self._to_domain(m)

    @_persistence_guard
    def list_for_user(self, user_id: int) -> list[Notification]:
        qs = self._Notification.objects.filter(user_id=user_id).order_by("-created_at", "-id")
        return [self._to_domain(m) for m in qs]

    @_persistence_guard
    def mark_read(self, notification_id: int, user_id: int) -> bool:
        qs = self._Notification.objects.filter(pk=notification_id, user_id=user_id)
        if not qs.exists():
            return False
        qs.update(read=True)
        return True

    @_persistence_guard
    def mark_all_read(self, user_id: int) -> int:
        return self._Notification.objects.filter(user_id=user_id, read=False).update(read=True)


class DjangoUnitOfWork:
    """
    UnitOfWork backed by `transaction.atomic`.

    Safe to share between threads: each thread keeps its own stack of
    open atomic blocks.
    """

    def __init__(self, using: Optional[str] = None):
        self._using = using
        self._local = threading.local()

    def _stack(self) -> list:
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    def __enter__(self):
        atomic = transaction.atomic(using=self._using)
        atomic.__enter__()
        self._stack().append(atomic)
        return self

    def __exit__(self, exc_type, exc, tb):
        atomic = self._stack().pop()
        try:
            atomic.__exit__(exc_type, exc, tb)
        except DatabaseError as e:
            logger.error(f"Commit failed: {e}", exc_info=True)
            raise PersistenceFailure("A storage error occurred") from e
        return False
