"""
Notification Dispatching

Turns ledger events into durable notifications and pushes them to live
observers. Decoupled from the ledger through the message bus: the ledger
publishes, the dispatcher subscribes.

Delivery rules:
- TransactionCreated  -> one `order_created` per admin
- TransactionApproved -> one `order_approved` to the owner
- KycSubmitted        -> one `kyc_submitted` per admin
- UserRegistered      -> one `new_user` per admin

Recording happens first; live delivery is best-effort and its failures
are logged, never raised.
"""

from __future__ import annotations

import logging
from typing import Optional

from apps.backend.core.domain.errors import NotFound
from apps.backend.core.domain.exchange import Notification, NotificationType
from apps.backend.core.application.ports import (
    ClockPort,
    KycSubmittedEvent,
    MessageBusPort,
    NotificationDeliveryPort,
    NotificationRepository,
    TransactionApprovedEvent,
    TransactionCreatedEvent,
    UserRegisteredEvent,
    UserRepository,
)

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Subscribes to lifecycle events and fans notifications out."""

    def __init__(
        self,
        notification_repo: NotificationRepository,
        user_repo: UserRepository,
        clock: ClockPort,
        delivery: Optional[NotificationDeliveryPort] = None,
    ):
        self._notification_repo = notification_repo
        self._user_repo = user_repo
        self._clock = clock
        self._delivery = delivery

    def register(self, bus: MessageBusPort) -> None:
        bus.subscribe("TransactionCreated", self.on_transaction_created)
        bus.subscribe("TransactionApproved", self.on_transaction_approved)
        bus.subscribe("KycSubmitted", self.on_kyc_submitted)
        bus.subscribe("UserRegistered", self.on_user_registered)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_transaction_created(self, event: TransactionCreatedEvent) -> None:
        owner = event.metadata.get("full_name") or f"user {event.user_id}"
        message = (
            f"New {event.trade_type} order #{event.transaction_id} from {owner} "
            f"for {event.amount} {event.currency} awaits approval"
        )
        for admin_id in self._user_repo.list_admin_ids():
            self.notify(admin_id, NotificationType.ORDER_CREATED, message, event.transaction_id)

    def on_transaction_approved(self, event: TransactionApprovedEvent) -> None:
        message = (
            f"Your {event.trade_type} order for {event.amount} {event.currency} "
            f"has been approved"
        )
        if event.loyalty_points_awarded:
            message += f" (+{event.loyalty_points_awarded} loyalty points)"
        self.notify(event.user_id, NotificationType.ORDER_APPROVED, message, event.transaction_id)

    def on_kyc_submitted(self, event: KycSubmittedEvent) -> None:
        message = f"User {event.full_name} has submitted KYC documents for verification"
        for admin_id in self._user_repo.list_admin_ids():
            self.notify(admin_id, NotificationType.KYC_SUBMITTED, message, event.user_id)

    def on_user_registered(self, event: UserRegisteredEvent) -> None:
        contact = f" ({event.email})" if event.email else ""
        message = f"New user registration: {event.full_name}{contact}"
        for admin_id in self._user_repo.list_admin_ids():
            if admin_id == event.user_id:
                continue
            self.notify(admin_id, NotificationType.NEW_USER, message, event.user_id)

    # ------------------------------------------------------------------
    # Record + deliver
    # ------------------------------------------------------------------

    def notify(
        self,
        user_id: int,
        notification_type: NotificationType,
        message: str,
        related_id: Optional[int],
    ) -> Notification:
        """Record a notification, then try to push it to live connections."""
        notification = self._notification_repo.add(
            Notification(
                id=None,
                user_id=user_id,
                type=notification_type,
                message=message,
                related_id=related_id,
                created_at=self._clock.now(),
            )
        )

        if self._delivery is not None:
            try:
                delivered = self._delivery.deliver(user_id, notification.to_payload())
                logger.debug(
                    f"Notification {notification.id} ({notification_type.value}) "
                    f"pushed to {delivered} connection(s) of user {user_id}"
                )
            except Exception as e:
                logger.warning(
                    f"Live delivery failed for notification {notification.id} "
                    f"(user {user_id}): {e}",
                    exc_info=True,
                )
        return notification


class NotificationInbox:
    """Recipient-side operations: list and mark read."""

    def __init__(self, notification_repo: NotificationRepository):
        self._notification_repo = notification_repo

    def list_for_user(self, user_id: int) -> list[Notification]:
        return self._notification_repo.list_for_user(user_id)

    def mark_read(self, notification_id: int, user_id: int) -> None:
        """Idempotent. Raises NotFound when the user does not own the notification."""
        if not self._notification_repo.mark_read(notification_id, user_id):
            raise NotFound(f"Notification {notification_id} not found")

    def mark_all_read(self, user_id: int) -> int:
        return self._notification_repo.mark_all_read(user_id)
