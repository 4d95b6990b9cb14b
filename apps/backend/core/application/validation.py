"""
Trade Validation

Gates a submission before it becomes a Transaction. Rules run in a fixed
order and the first violation wins (fail-fast). Nothing here persists.

Rule order:
1. Verification: mobile verified and KYC approved  -> VerificationRequired
2. Payload shape: type, amount, side-specific field  -> ValidationError(field)
3. Proof of payment present and acceptable           -> MissingProof / ValidationError
4. Settlement-leg receiving details configured       -> AccountNotConfigured(setting)
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Any, Mapping, Optional

from apps.backend.core.domain.documents import MAX_DOCUMENT_SIZE, check_document
from apps.backend.core.domain.errors import (
    AccountNotConfigured,
    MissingProof,
    ValidationError,
    VerificationRequired,
)
from apps.backend.core.domain.exchange import (
    BuyRequest,
    CliqType,
    CurrencyBasis,
    DocumentUpload,
    Network,
    PaymentMethod,
    SellRequest,
    TradeRequest,
    TradeType,
    UserProfile,
)
from apps.backend.core.domain.quote import Quote

logger = logging.getLogger(__name__)

AMOUNT_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")

# Typed amounts stay below 10^12; ledger columns are DECIMAL(20, 2).
MAX_AMOUNT = Decimal(10) ** 12
MAX_LEDGER_AMOUNT = Decimal(10) ** 18


def parse_amount(raw: Any, field: str = "amount") -> Decimal:
    """Parse a positive decimal string with at most 2 fractional digits."""
    if raw is None or raw == "":
        raise ValidationError(field, "Amount is required")
    if not isinstance(raw, str):
        raise ValidationError(field, "Amount must be a decimal string")
    if not AMOUNT_PATTERN.fullmatch(raw):
        raise ValidationError(
            field, "Amount must be a valid number with up to 2 decimal places"
        )
    amount = Decimal(raw)
    if amount <= 0:
        raise ValidationError(field, "Amount must be greater than zero")
    if amount >= MAX_AMOUNT:
        raise ValidationError(field, "Amount must be less than 1000000000000")
    return amount


def check_priced_amounts(quote: Quote, field: str = "amount") -> None:
    """Reject quotes whose native amount rounds to zero or overflows the ledger."""
    if quote.native_amount <= 0:
        raise ValidationError(field, "Amount is too small at the current rate")
    largest = max(quote.equivalent_amount, quote.commission_amount, quote.final_amount)
    if largest >= MAX_LEDGER_AMOUNT:
        raise ValidationError(field, "Amount is too large at the current rate")


def parse_choice(enum_cls, raw: Any, field: str, label: str):
    if raw is None or raw == "":
        raise ValidationError(field, f"{label} is required")
    try:
        return enum_cls(str(raw).lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(field, f"{label} must be one of: {allowed}")


def parse_trade_request(payload: Mapping[str, Any]) -> TradeRequest:
    """
    Turn a loosely-typed payload into a BuyRequest or SellRequest.

    Expected keys: type, amount, basis (optional, defaults to native),
    network (sell), payment_method (buy).
    """
    trade_type = parse_choice(TradeType, payload.get("type"), "type", "Trade type")
    amount = parse_amount(payload.get("amount"))

    raw_basis = payload.get("basis") or CurrencyBasis.NATIVE.value
    basis = parse_choice(CurrencyBasis, raw_basis, "basis", "Basis")

    if trade_type == TradeType.SELL:
        network = parse_choice(Network, payload.get("network"), "network", "Network")
        return SellRequest(amount=amount, network=network, basis=basis)

    payment_method = parse_choice(
        PaymentMethod, payload.get("payment_method"), "payment_method", "Payment method"
    )
    return BuyRequest(amount=amount, payment_method=payment_method, basis=basis)


def check_settlement_account(user: UserProfile, trade_type: TradeType) -> None:
    """
    Require the account where the user receives the settled currency.

    - buy: user receives USDT -> USDT address and network
    - sell: user receives JOD over CliQ -> CliQ type plus matching alias/number
    """
    if trade_type == TradeType.BUY:
        if not user.has_usdt_wallet:
            raise AccountNotConfigured(
                "usdt_address",
                "A USDT receiving address must be configured for buy orders",
            )
        return

    if user.cliq_type is None:
        raise AccountNotConfigured(
            "cliq_settings", "CliQ settings must be configured for sell orders"
        )
    if user.cliq_snapshot() is None:
        missing = "cliq_alias" if user.cliq_type == CliqType.ALIAS else "cliq_number"
        raise AccountNotConfigured(
            "cliq_settings",
            f"CliQ settings must be configured for sell orders ({missing} is missing)",
        )


class TradeValidator:
    """
    Validate a trade submission for a user.

    Stateless; safe to share between requests.
    """

    def __init__(self, max_proof_size: int = MAX_DOCUMENT_SIZE):
        self._max_proof_size = max_proof_size

    def validate(
        self,
        user: UserProfile,
        payload: Mapping[str, Any],
        proof: Optional[DocumentUpload],
    ) -> TradeRequest:
        """
        Run every rule in order.

        Returns:
            The typed trade request

        Raises:
            VerificationRequired, ValidationError, MissingProof, AccountNotConfigured
        """
        if not user.is_verified:
            logger.info(f"Trade rejected: user {user.id} is not verified")
            raise VerificationRequired(
                "Mobile verification and approved KYC are required before trading"
            )

        request = parse_trade_request(payload)

        if proof is None:
            raise MissingProof()
        check_document(proof, "proof_of_payment", self._max_proof_size)

        check_settlement_account(user, request.trade_type)
        return request
