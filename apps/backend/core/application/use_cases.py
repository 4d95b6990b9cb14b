"""
Use Cases - Business Logic Orchestration

Use cases orchestrate domain logic and coordinate between ports.
They represent the application's operations (what the system can do).

Key principles:
- Each use case is a single business operation
- Use cases depend on ports (interfaces), not adapters (implementations)
- Use cases are framework-agnostic (no Django, no HTTP, no database)
- Use cases publish domain events after their writes commit
"""

from dataclasses import replace
from decimal import Decimal
from typing import Any, Mapping, Optional
import logging
import uuid

from apps.backend.core.domain.documents import check_document
from apps.backend.core.domain.errors import AlreadyApproved, NotFound, ValidationError
from apps.backend.core.domain.exchange import (
    CurrencyBasis,
    DocumentUpload,
    RateConfiguration,
    SellRequest,
    Transaction,
    TransactionStatus,
    TradeType,
    UserProfile,
)
from apps.backend.core.domain.quote import Quote, calculate_quote, native_fee
from apps.backend.core.application.ports import (
    ClockPort,
    DocumentStoragePort,
    KycSubmittedEvent,
    MessageBusPort,
    NullUnitOfWork,
    RateConfigurationRepository,
    TransactionApprovedEvent,
    TransactionCreatedEvent,
    TransactionRepository,
    UnitOfWork,
    UserRegisteredEvent,
    UserRepository,
)
from apps.backend.core.application.validation import (
    TradeValidator,
    check_priced_amounts,
    parse_choice,
    parse_amount,
)

logger = logging.getLogger(__name__)

LOYALTY_POINT_DIVISOR = Decimal("100")


def loyalty_points_for(amount: Decimal, divisor: Decimal = LOYALTY_POINT_DIVISOR) -> int:
    """Integer floor of amount / divisor."""
    if amount <= 0:
        return 0
    return int(amount // divisor)


def order_for_review(transactions: list[Transaction]) -> list[Transaction]:
    """Pending first (oldest first), then approved (newest first)."""
    pending = sorted(
        (t for t in transactions if t.is_pending),
        key=lambda t: (t.created_at, t.id or 0),
    )
    approved = sorted(
        (t for t in transactions if not t.is_pending),
        key=lambda t: (t.created_at, t.id or 0),
        reverse=True,
    )
    return pending + approved


def _load_profile(users: UserRepository, user_id: int) -> UserProfile:
    profile = users.get_profile(user_id)
    if profile is None:
        raise NotFound(f"User {user_id} not found")
    return profile


# ============================================================================
# Create Transaction Use Case
# ============================================================================

class CreateTransactionUseCase:
    """
    Turn a trade submission into a priced, pending transaction.

    This use case:
    1. Validates the user and payload (TradeValidator)
    2. Prices the request against the rates read at call time, rejecting
       amounts that round to zero or overflow the ledger
    3. Stores the proof of payment
    4. Persists the transaction as PENDING
    5. Publishes TransactionCreated (admins get notified)

    Does NOT:
    - Move funds (everything is bookkeeping until an admin approves)
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        user_repo: UserRepository,
        rate_repo: RateConfigurationRepository,
        document_storage: DocumentStoragePort,
        message_bus: MessageBusPort,
        clock: ClockPort,
        validator: Optional[TradeValidator] = None,
        uow: Optional[UnitOfWork] = None,
    ):
        self._transaction_repo = transaction_repo
        self._user_repo = user_repo
        self._rate_repo = rate_repo
        self._document_storage = document_storage
        self._message_bus = message_bus
        self._clock = clock
        self._validator = validator or TradeValidator()
        self._uow = uow

    def execute(
        self,
        user_id: int,
        payload: Mapping[str, Any],
        proof: Optional[DocumentUpload],
        rates: Optional[RateConfiguration] = None,
    ) -> Transaction:
        """
        Create a pending transaction.

        Args:
            user_id: Owner of the trade
            payload: {type, amount, basis?, network?, payment_method?}
            proof: Uploaded proof of payment
            rates: Explicit rate snapshot; read from the repository when omitted

        Returns:
            Persisted Transaction

        Raises:
            NotFound, VerificationRequired, ValidationError, MissingProof,
            AccountNotConfigured, PersistenceFailure
        """
        user = _load_profile(self._user_repo, user_id)
        request = self._validator.validate(user, payload, proof)

        config = rates if rates is not None else self._rate_repo.get()
        trade_type = request.trade_type
        quote = calculate_quote(request.amount, trade_type, request.basis, config)
        check_priced_amounts(quote)
        amount = quote.native_amount

        if isinstance(request, SellRequest):
            snapshot = user.cliq_snapshot()
            network = request.network
            payment_method = None
        else:
            snapshot = None
            network = None
            payment_method = request.payment_method

        now = self._clock.now()
        transaction = Transaction(
            id=None,
            user_id=user.id,
            type=trade_type,
            amount=amount,
            rate=quote.rate,
            commission=quote.commission_rate,
            fee=native_fee(amount, quote.commission_rate),
            basis=request.basis,
            final_amount=quote.final_amount,
            status=TransactionStatus.PENDING,
            proof_of_payment="",
            created_at=now,
            network=network,
            payment_method=payment_method,
            cliq_type=snapshot.cliq_type if snapshot else None,
            cliq_alias=snapshot.cliq_alias if snapshot else None,
            cliq_number=snapshot.cliq_number if snapshot else None,
        )

        proof_reference = self._document_storage.save(
            f"payment_proofs/{user.id}", proof.filename, proof.content
        )
        transaction = replace(transaction, proof_of_payment=proof_reference)

        ctx = self._uow if self._uow is not None else NullUnitOfWork()
        with ctx:
            saved = self._transaction_repo.add(transaction)

        logger.info(
            f"Transaction created: id={saved.id}, user_id={user.id}, "
            f"type={trade_type.value}, amount={saved.amount} {saved.currency.value}, "
            f"rate={saved.rate}, basis={saved.basis.value}"
        )

        self._message_bus.publish(
            TransactionCreatedEvent(
                event_id=f"evt-{uuid.uuid4()}",
                event_type="TransactionCreated",
                timestamp=now,
                aggregate_id=str(saved.id),
                transaction_id=saved.id,
                user_id=user.id,
                trade_type=trade_type.value,
                amount=saved.amount,
                currency=saved.currency.value,
                metadata={"full_name": user.full_name or user.username},
            )
        )
        return saved


# ============================================================================
# Approve Transaction Use Case
# ============================================================================

class ApproveTransactionUseCase:
    """
    Approve a pending transaction.

    Business Rules:
    - Only PENDING transactions can be approved
    - Approval happens at most once; a second call raises AlreadyApproved
      and has no side effects (no extra points, no extra notification)
    - The owner earns floor(amount / 100) loyalty points
    """

    def __init__(
        self,
        transaction_repo: TransactionRepository,
        user_repo: UserRepository,
        message_bus: MessageBusPort,
        clock: ClockPort,
        uow: Optional[UnitOfWork] = None,
        loyalty_divisor: Decimal = LOYALTY_POINT_DIVISOR,
    ):
        self._transaction_repo = transaction_repo
        self._user_repo = user_repo
        self._message_bus = message_bus
        self._clock = clock
        self._uow = uow
        self._loyalty_divisor = loyalty_divisor

    def execute(self, transaction_id: int, approver_id: int) -> Transaction:
        """
        Raises:
            NotFound: Unknown transaction ID
            AlreadyApproved: Transaction is not pending
        """
        now = self._clock.now()

        ctx = self._uow if self._uow is not None else NullUnitOfWork()
        with ctx:
            approved = self._transaction_repo.mark_approved(transaction_id, approver_id, now)
            if approved is None:
                if self._transaction_repo.find_by_id(transaction_id) is None:
                    raise NotFound(f"Transaction {transaction_id} not found")
                raise AlreadyApproved(f"Transaction {transaction_id} is already approved")

            points = loyalty_points_for(approved.amount, self._loyalty_divisor)
            if points:
                self._user_repo.add_loyalty_points(approved.user_id, points)

        logger.info(
            f"Transaction approved: id={approved.id}, approver_id={approver_id}, "
            f"user_id={approved.user_id}, loyalty_points={points}"
        )

        self._message_bus.publish(
            TransactionApprovedEvent(
                event_id=f"evt-{uuid.uuid4()}",
                event_type="TransactionApproved",
                timestamp=now,
                aggregate_id=str(approved.id),
                transaction_id=approved.id,
                user_id=approved.user_id,
                approver_id=approver_id,
                trade_type=approved.type.value,
                amount=approved.amount,
                currency=approved.currency.value,
                loyalty_points_awarded=points,
            )
        )
        return approved


# ============================================================================
# Transaction Queries
# ============================================================================

class TransactionQueries:
    """Read-only access to the ledger. No side effects."""

    def __init__(self, transaction_repo: TransactionRepository):
        self._transaction_repo = transaction_repo

    def get(self, transaction_id: int) -> Transaction:
        transaction = self._transaction_repo.find_by_id(transaction_id)
        if transaction is None:
            raise NotFound(f"Transaction {transaction_id} not found")
        return transaction

    def list_for_user(self, user_id: int) -> list[Transaction]:
        return self._transaction_repo.list_for_user(user_id)

    def list_all(self) -> list[Transaction]:
        """Admin review order: outstanding work ahead of history."""
        return order_for_review(self._transaction_repo.list_all())


# ============================================================================
# Rate Configuration Use Cases
# ============================================================================

class GetRateConfigurationUseCase:
    def __init__(self, rate_repo: RateConfigurationRepository):
        self._rate_repo = rate_repo

    def execute(self) -> RateConfiguration:
        return self._rate_repo.get()


class UpdateRateConfigurationUseCase:
    """
    Replace the platform rate configuration (admin only).

    Every rate key is required; receiving-detail keys that are omitted are
    cleared. There is no partial update.
    """

    def __init__(self, rate_repo: RateConfigurationRepository):
        self._rate_repo = rate_repo

    def execute(self, values: Mapping[str, Any], actor_id: int) -> RateConfiguration:
        config = RateConfiguration.from_settings(
            {key: str(value) for key, value in values.items() if value is not None}
        )
        saved = self._rate_repo.replace(config)
        logger.info(
            f"Rate configuration replaced by user {actor_id}: "
            f"buy={saved.buy_rate} ({saved.buy_commission_rate}), "
            f"sell={saved.sell_rate} ({saved.sell_commission_rate})"
        )
        return saved


class QuoteTradeUseCase:
    """Preview pricing for {type, amount, basis} against current rates."""

    def __init__(self, rate_repo: RateConfigurationRepository):
        self._rate_repo = rate_repo

    def execute(self, payload: Mapping[str, Any]) -> Quote:
        trade_type = parse_choice(TradeType, payload.get("type"), "type", "Trade type")
        amount = parse_amount(payload.get("amount"))
        raw_basis = payload.get("basis") or CurrencyBasis.NATIVE.value
        basis = parse_choice(CurrencyBasis, raw_basis, "basis", "Basis")
        quote = calculate_quote(amount, trade_type, basis, self._rate_repo.get())
        check_priced_amounts(quote)
        return quote


# ============================================================================
# KYC Use Cases
# ============================================================================

class SubmitKycDocumentUseCase:
    """
    Store a KYC document and put the user back into KYC review.

    Publishes KycSubmitted so admins are notified.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        document_storage: DocumentStoragePort,
        message_bus: MessageBusPort,
        clock: ClockPort,
    ):
        self._user_repo = user_repo
        self._document_storage = document_storage
        self._message_bus = message_bus
        self._clock = clock

    def execute(self, user_id: int, document: Optional[DocumentUpload]) -> str:
        user = _load_profile(self._user_repo, user_id)
        if document is None:
            raise ValidationError("document", "A KYC document is required")
        check_document(document, "document")

        reference = self._document_storage.save(
            f"kyc/{user.id}", document.filename, document.content
        )
        self._user_repo.set_kyc_document(user.id, reference)
        logger.info(f"KYC document submitted: user_id={user.id}")

        now = self._clock.now()
        self._message_bus.publish(
            KycSubmittedEvent(
                event_id=f"evt-{uuid.uuid4()}",
                event_type="KycSubmitted",
                timestamp=now,
                aggregate_id=str(user.id),
                user_id=user.id,
                full_name=user.full_name or user.username,
            )
        )
        return reference


class ApproveKycUseCase:
    def __init__(self, user_repo: UserRepository):
        self._user_repo = user_repo

    def execute(self, user_id: int, approver_id: int) -> UserProfile:
        if not self._user_repo.approve_kyc(user_id):
            raise NotFound(f"User {user_id} not found")
        logger.info(f"KYC approved: user_id={user_id}, approver_id={approver_id}")
        return _load_profile(self._user_repo, user_id)


# ============================================================================
# Registration
# ============================================================================

class AnnounceRegistrationUseCase:
    """Publish UserRegistered for a freshly created account (admins get notified)."""

    def __init__(self, user_repo: UserRepository, message_bus: MessageBusPort, clock: ClockPort):
        self._user_repo = user_repo
        self._message_bus = message_bus
        self._clock = clock

    def execute(self, user_id: int, email: str = "") -> None:
        user = _load_profile(self._user_repo, user_id)
        logger.info(f"User registered: user_id={user.id}")
        self._message_bus.publish(
            UserRegisteredEvent(
                event_id=f"evt-{uuid.uuid4()}",
                event_type="UserRegistered",
                timestamp=self._clock.now(),
                aggregate_id=str(user.id),
                user_id=user.id,
                full_name=user.full_name or user.username,
                email=email,
            )
        )
