"""Composition root for dependency injection.

Factories here assemble use cases with concrete adapters. Each factory
returns a process-wide singleton; the message bus is created with the
notification dispatcher already subscribed so no event can be published
before its handlers exist.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings

from apps.backend.core.application.notifications import (
    NotificationDispatcher,
    NotificationInbox,
)
from apps.backend.core.application.use_cases import (
    AnnounceRegistrationUseCase,
    ApproveKycUseCase,
    ApproveTransactionUseCase,
    CreateTransactionUseCase,
    GetRateConfigurationUseCase,
    QuoteTradeUseCase,
    SubmitKycDocumentUseCase,
    TransactionQueries,
    UpdateRateConfigurationUseCase,
)
from apps.backend.core.application.validation import TradeValidator
from apps.backend.core.adapters.driven.messaging.connections import ConnectionRegistry
from apps.backend.core.adapters.driven.messaging.in_memory import InMemoryMessageBus
from apps.backend.core.adapters.driven.persistence.django_repositories import (
    DjangoNotificationRepository,
    DjangoRateConfigurationRepository,
    DjangoTransactionRepository,
    DjangoUnitOfWork,
    DjangoUserRepository,
)
from apps.backend.core.adapters.driven.storage.django_storage import DjangoDocumentStorage
from apps.backend.core.adapters.driven.time.clock import SystemClock


_singletons: dict[str, object] = {}


def get_singleton(key: str, factory):
    if key not in _singletons:
        _singletons[key] = factory()
    return _singletons[key]


def reset_container() -> None:
    """Forget every singleton (tests)."""
    _singletons.clear()


def _exchange_setting(name: str, default):
    return getattr(settings, "EXCHANGE", {}).get(name, default)


# ----------------------------------------------------------------------------
# Adapters
# ----------------------------------------------------------------------------

def get_clock() -> SystemClock:
    return get_singleton("clock", SystemClock)


def get_connection_registry() -> ConnectionRegistry:
    return get_singleton("connection_registry", ConnectionRegistry)


def get_document_storage() -> DjangoDocumentStorage:
    return get_singleton("document_storage", DjangoDocumentStorage)


def get_notification_dispatcher() -> NotificationDispatcher:
    def factory():
        return NotificationDispatcher(
            DjangoNotificationRepository(),
            DjangoUserRepository(),
            get_clock(),
            delivery=get_connection_registry(),
        )

    return get_singleton("notification_dispatcher", factory)


def get_message_bus() -> InMemoryMessageBus:
    def factory():
        bus = InMemoryMessageBus()
        get_notification_dispatcher().register(bus)
        return bus

    return get_singleton("message_bus", factory)


# ----------------------------------------------------------------------------
# Use cases
# ----------------------------------------------------------------------------

def get_create_transaction_uc() -> CreateTransactionUseCase:
    def factory():
        validator = TradeValidator(
            max_proof_size=int(_exchange_setting("MAX_PROOF_SIZE", 5 * 1024 * 1024))
        )
        return CreateTransactionUseCase(
            DjangoTransactionRepository(),
            DjangoUserRepository(),
            DjangoRateConfigurationRepository(),
            get_document_storage(),
            get_message_bus(),
            get_clock(),
            validator=validator,
            uow=DjangoUnitOfWork(),
        )

    return get_singleton("create_transaction_uc", factory)


def get_approve_transaction_uc() -> ApproveTransactionUseCase:
    def factory():
        return ApproveTransactionUseCase(
            DjangoTransactionRepository(),
            DjangoUserRepository(),
            get_message_bus(),
            get_clock(),
            uow=DjangoUnitOfWork(),
            loyalty_divisor=Decimal(str(_exchange_setting("LOYALTY_POINT_DIVISOR", 100))),
        )

    return get_singleton("approve_transaction_uc", factory)


def get_transaction_queries() -> TransactionQueries:
    return get_singleton(
        "transaction_queries", lambda: TransactionQueries(DjangoTransactionRepository())
    )


def get_rate_configuration_uc() -> GetRateConfigurationUseCase:
    return get_singleton(
        "rate_configuration_uc",
        lambda: GetRateConfigurationUseCase(DjangoRateConfigurationRepository()),
    )


def get_update_rate_configuration_uc() -> UpdateRateConfigurationUseCase:
    return get_singleton(
        "update_rate_configuration_uc",
        lambda: UpdateRateConfigurationUseCase(DjangoRateConfigurationRepository()),
    )


def get_quote_trade_uc() -> QuoteTradeUseCase:
    return get_singleton(
        "quote_trade_uc", lambda: QuoteTradeUseCase(DjangoRateConfigurationRepository())
    )


def get_submit_kyc_uc() -> SubmitKycDocumentUseCase:
    def factory():
        return SubmitKycDocumentUseCase(
            DjangoUserRepository(),
            get_document_storage(),
            get_message_bus(),
            get_clock(),
        )

    return get_singleton("submit_kyc_uc", factory)


def get_approve_kyc_uc() -> ApproveKycUseCase:
    return get_singleton("approve_kyc_uc", lambda: ApproveKycUseCase(DjangoUserRepository()))


def get_notification_inbox() -> NotificationInbox:
    return get_singleton(
        "notification_inbox", lambda: NotificationInbox(DjangoNotificationRepository())
    )


def get_announce_registration_uc() -> AnnounceRegistrationUseCase:
    def factory():
        return AnnounceRegistrationUseCase(DjangoUserRepository(), get_message_bus(), get_clock())

    return get_singleton("announce_registration_uc", factory)
