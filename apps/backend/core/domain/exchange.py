"""
Exchange Domain Models

Pure business entities for the USDT/JOD exchange desk.
No framework dependencies.
"""

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import Optional, Union
from enum import Enum

from apps.backend.core.domain.errors import ValidationError


# ============================================================================
# Enums
# ============================================================================

class TradeType(str, Enum):
    """Direction of a trade, from the user's point of view on USDT."""
    BUY = "buy"  # User pays JOD, receives USDT
    SELL = "sell"  # User sends USDT, receives JOD


class CurrencyBasis(str, Enum):
    """Which side of the pair the user typed the amount in."""
    NATIVE = "native"
    FOREIGN = "foreign"


class Currency(str, Enum):
    JOD = "JOD"
    USDT = "USDT"


class TransactionStatus(str, Enum):
    PENDING = "pending"  # Submitted, awaiting admin review
    APPROVED = "approved"  # Terminal


class Network(str, Enum):
    """Blockchain networks on which the platform receives USDT."""
    TRC20 = "trc20"
    BEP20 = "bep20"


class PaymentMethod(str, Enum):
    """Platform-side rails a buyer can pay JOD through."""
    CLIQ = "cliq"
    WALLET = "wallet"


class CliqType(str, Enum):
    ALIAS = "alias"
    NUMBER = "number"


class KycStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"


class NotificationType(str, Enum):
    NEW_USER = "new_user"
    KYC_SUBMITTED = "kyc_submitted"
    ORDER_CREATED = "order_created"
    ORDER_APPROVED = "order_approved"


def native_currency(trade_type: TradeType) -> Currency:
    """Currency the persisted amount is expressed in (JOD for buy, USDT for sell)."""
    return Currency.JOD if trade_type == TradeType.BUY else Currency.USDT


def foreign_currency(trade_type: TradeType) -> Currency:
    return Currency.USDT if trade_type == TradeType.BUY else Currency.JOD


# ============================================================================
# Rate Configuration (singleton, replaced as a whole)
# ============================================================================

RATE_FIELDS = ("buy_rate", "buy_commission_rate", "sell_rate", "sell_commission_rate")

RECEIVING_FIELDS = (
    "cliq_alias",
    "cliq_bank_name",
    "cliq_account_holder",
    "cliq_number",
    "cliq_bank_name_for_number",
    "cliq_number_account_holder",
    "mobile_wallet",
    "wallet_type",
    "wallet_holder_name",
    "usdt_address_trc20",
    "usdt_address_bep20",
)


@dataclass(frozen=True)
class RateConfiguration:
    """
    Platform pricing and receiving details.

    Rates are JOD per 1 USDT. Commissions are fractions in [0, 1].
    Instances are immutable; an admin update produces a new configuration
    that replaces the previous one entirely.
    """
    buy_rate: Decimal
    buy_commission_rate: Decimal
    sell_rate: Decimal
    sell_commission_rate: Decimal

    # Where users send funds to the platform
    cliq_alias: str = ""
    cliq_bank_name: str = ""
    cliq_account_holder: str = ""
    cliq_number: str = ""
    cliq_bank_name_for_number: str = ""
    cliq_number_account_holder: str = ""
    mobile_wallet: str = ""
    wallet_type: str = ""
    wallet_holder_name: str = ""
    usdt_address_trc20: str = ""
    usdt_address_bep20: str = ""

    def __post_init__(self):
        """Validate invariants."""
        for name in ("buy_rate", "sell_rate"):
            if getattr(self, name) <= 0:
                raise ValidationError(name, "Rate must be positive")
        for name in ("buy_commission_rate", "sell_commission_rate"):
            value = getattr(self, name)
            if value < 0 or value > 1:
                raise ValidationError(name, "Commission must be a fraction between 0 and 1")

    def rate_for(self, trade_type: TradeType) -> Decimal:
        return self.buy_rate if trade_type == TradeType.BUY else self.sell_rate

    def commission_for(self, trade_type: TradeType) -> Decimal:
        if trade_type == TradeType.BUY:
            return self.buy_commission_rate
        return self.sell_commission_rate

    def usdt_address_for(self, network: Network) -> str:
        if network == Network.TRC20:
            return self.usdt_address_trc20
        return self.usdt_address_bep20

    def to_settings(self) -> dict[str, str]:
        """Flatten to the key/value form used by platform settings storage."""
        data = {name: str(getattr(self, name)) for name in RATE_FIELDS}
        data.update({name: getattr(self, name) for name in RECEIVING_FIELDS})
        return data

    @classmethod
    def from_settings(
        cls,
        values: dict[str, str],
        defaults: Optional[dict[str, str]] = None,
    ) -> "RateConfiguration":
        """
        Build a configuration from stored key/value settings.

        Missing keys fall back to `defaults`. Unparseable rates raise
        ValidationError attributed to the offending key.
        """
        merged = dict(defaults or {})
        merged.update({k: v for k, v in values.items() if v is not None})

        kwargs: dict = {}
        for name in RATE_FIELDS:
            raw = merged.get(name)
            if raw in (None, ""):
                raise ValidationError(name, f"{name} is not configured")
            try:
                kwargs[name] = Decimal(str(raw))
            except InvalidOperation:
                raise ValidationError(name, f"{name} must be a decimal number")
            if not kwargs[name].is_finite():
                raise ValidationError(name, f"{name} must be a decimal number")
        for name in RECEIVING_FIELDS:
            kwargs[name] = str(merged.get(name) or "")
        return cls(**kwargs)


# ============================================================================
# User Profile (read-only view of the authenticated principal)
# ============================================================================

@dataclass(frozen=True)
class CliqSnapshot:
    """CliQ receiving identity copied onto a sell transaction."""
    cliq_type: CliqType
    cliq_alias: Optional[str]
    cliq_number: Optional[str]


@dataclass(frozen=True)
class UserProfile:
    """
    The parts of a user account the engine reads.

    Identity management lives outside the core; this is a snapshot taken
    at request time.
    """
    id: int
    username: str
    role: str = "user"
    full_name: str = ""
    mobile_verified: bool = False
    kyc_status: KycStatus = KycStatus.PENDING
    loyalty_points: int = 0

    # Settlement-leg receiving details
    usdt_address: Optional[str] = None
    usdt_network: Optional[Network] = None
    cliq_type: Optional[CliqType] = None
    cliq_alias: Optional[str] = None
    cliq_number: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_verified(self) -> bool:
        """Mobile verified and KYC approved."""
        return bool(self.mobile_verified) and self.kyc_status == KycStatus.APPROVED

    @property
    def has_usdt_wallet(self) -> bool:
        return bool(self.usdt_address) and self.usdt_network is not None

    def cliq_snapshot(self) -> Optional[CliqSnapshot]:
        """Return the CliQ identity matching cliq_type, or None if incomplete."""
        if self.cliq_type == CliqType.ALIAS and self.cliq_alias:
            return CliqSnapshot(CliqType.ALIAS, self.cliq_alias, None)
        if self.cliq_type == CliqType.NUMBER and self.cliq_number:
            return CliqSnapshot(CliqType.NUMBER, None, self.cliq_number)
        return None


# ============================================================================
# Trade Requests (tagged union)
# ============================================================================

@dataclass(frozen=True)
class BuyRequest:
    """User pays JOD through `payment_method` and receives USDT."""
    amount: Decimal
    payment_method: PaymentMethod
    basis: CurrencyBasis = CurrencyBasis.NATIVE

    trade_type = TradeType.BUY


@dataclass(frozen=True)
class SellRequest:
    """User sends USDT on `network` and receives JOD over CliQ."""
    amount: Decimal
    network: Network
    basis: CurrencyBasis = CurrencyBasis.NATIVE

    trade_type = TradeType.SELL


TradeRequest = Union[BuyRequest, SellRequest]


@dataclass(frozen=True)
class DocumentUpload:
    """An uploaded artifact (payment proof, KYC document) before storage."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


# ============================================================================
# Transaction
# ============================================================================

@dataclass
class Transaction:
    """
    A priced trade request awaiting (or past) admin approval.

    Pricing facts (rate, commission, fee, final_amount) are captured by
    value at submission and never change afterwards.

    Lifecycle:
    1. PENDING: Created by CreateTransactionUseCase
    2. APPROVED: Admin approved; loyalty points awarded (terminal)

    Key Principle: `amount` is always in the native currency of the trade
    type (JOD for buy, USDT for sell), whatever the user typed.
    """
    id: Optional[int]
    user_id: int
    type: TradeType
    amount: Decimal
    rate: Decimal
    commission: Decimal  # Commission fraction in effect at submission
    fee: Decimal  # Commission amount in the native currency
    basis: CurrencyBasis
    final_amount: Decimal  # Quote final amount shown to the user
    status: TransactionStatus
    proof_of_payment: str
    created_at: datetime

    network: Optional[Network] = None
    payment_method: Optional[PaymentMethod] = None

    # CliQ snapshot (sell only)
    cliq_type: Optional[CliqType] = None
    cliq_alias: Optional[str] = None
    cliq_number: Optional[str] = None

    approved_at: Optional[datetime] = None
    approved_by: Optional[int] = None

    def __post_init__(self):
        """Validate invariants."""
        if self.amount <= 0:
            raise ValueError("Amount must be positive")
        if self.rate <= 0:
            raise ValueError("Rate must be positive")
        if self.type == TradeType.SELL:
            if self.network is None:
                raise ValueError("Sell transactions require a network")
            if self.payment_method is not None:
                raise ValueError("Sell transactions cannot carry a payment method")
            if self.cliq_type is None:
                raise ValueError("Sell transactions require a CliQ snapshot")
        else:
            if self.payment_method is None:
                raise ValueError("Buy transactions require a payment method")
            if self.network is not None:
                raise ValueError("Buy transactions cannot carry a network")
            if self.cliq_type or self.cliq_alias or self.cliq_number:
                raise ValueError("Buy transactions cannot carry CliQ details")
        if self.status == TransactionStatus.APPROVED and self.approved_at is None:
            raise ValueError("Approved transactions require approved_at")

    @property
    def is_pending(self) -> bool:
        return self.status == TransactionStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == TransactionStatus.APPROVED

    @property
    def currency(self) -> Currency:
        return native_currency(self.type)

    def mark_as_approved(self, timestamp: datetime, approver_id: int) -> "Transaction":
        """Return new transaction with APPROVED status."""
        if not self.is_pending:
            raise ValueError(f"Cannot approve transaction in {self.status.value} state")
        return replace(
            self,
            status=TransactionStatus.APPROVED,
            approved_at=timestamp,
            approved_by=approver_id,
        )


# ============================================================================
# Notification
# ============================================================================

@dataclass
class Notification:
    """A durable message to one user about a lifecycle event."""
    id: Optional[int]
    user_id: int
    type: NotificationType
    message: str
    related_id: Optional[int]
    created_at: datetime
    read: bool = False

    def to_payload(self) -> dict:
        """Out-of-band delivery shape for live observers."""
        return {
            "type": self.type.value,
            "message": self.message,
            "data": {
                "user_id": self.user_id,
                "related_id": self.related_id,
                "notification_id": self.id,
            },
            "timestamp": self.created_at.isoformat(),
        }
