"""
Domain Layer - Pure Business Logic

This layer contains:
- Entities (Transaction, Notification)
- Value Objects (RateConfiguration, UserProfile, trade requests, Quote)
- Domain services (quote calculation)
- The error taxonomy shared by every layer

CRITICAL RULES:
- ZERO framework dependencies (no Django, no database, no HTTP)
- Pure Python only (stdlib + typing)
- Value objects are immutable (dataclasses with frozen=True)
- Business logic is explicit and testable

If you need Django models, put them in apps/backend/monolith/api/models/
This layer is for the PURE business domain.
"""

# Exchange domain
from apps.backend.core.domain.exchange import (
    TradeType,
    CurrencyBasis,
    Currency,
    TransactionStatus,
    Network,
    PaymentMethod,
    CliqType,
    KycStatus,
    NotificationType,
    RateConfiguration,
    UserProfile,
    CliqSnapshot,
    BuyRequest,
    SellRequest,
    TradeRequest,
    DocumentUpload,
    Transaction,
    Notification,
    native_currency,
    foreign_currency,
)

# Pricing
from apps.backend.core.domain.quote import (
    Quote,
    calculate_quote,
    to_native_amount,
    to_foreign_amount,
    round_money,
)

# Errors
from apps.backend.core.domain.errors import (
    ExchangeError,
    ValidationError,
    VerificationRequired,
    AccountNotConfigured,
    MissingProof,
    NotFound,
    AlreadyApproved,
    PersistenceFailure,
)

__all__ = [
    # Exchange
    "TradeType",
    "CurrencyBasis",
    "Currency",
    "TransactionStatus",
    "Network",
    "PaymentMethod",
    "CliqType",
    "KycStatus",
    "NotificationType",
    "RateConfiguration",
    "UserProfile",
    "CliqSnapshot",
    "BuyRequest",
    "SellRequest",
    "TradeRequest",
    "DocumentUpload",
    "Transaction",
    "Notification",
    "native_currency",
    "foreign_currency",
    # Pricing
    "Quote",
    "calculate_quote",
    "to_native_amount",
    "to_foreign_amount",
    "round_money",
    # Errors
    "ExchangeError",
    "ValidationError",
    "VerificationRequired",
    "AccountNotConfigured",
    "MissingProof",
    "NotFound",
    "AlreadyApproved",
    "PersistenceFailure",
]
