"""
Quote Calculator

Converts an amount typed by the user into the equivalent amount, the
commission and the final settlement amount for a trade.

Pure functions: no I/O, no bounds checking (inputs are validated upstream).

Conversion table (rate = JOD per 1 USDT, c = commission fraction):

    type  basis    typed  equivalent        commission          final
    buy   foreign  USDT   amount*rate JOD   equivalent*c JOD    equivalent*(1+c) JOD to pay
    buy   native   JOD    amount/rate USDT  equivalent*c USDT   equivalent*(1-c) USDT received
    sell  foreign  JOD    amount/rate USDT  equivalent*c USDT   equivalent+commission USDT to send
    sell  native   USDT   amount*rate JOD   equivalent*c JOD    equivalent-commission JOD received
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from apps.backend.core.domain.exchange import (
    Currency,
    CurrencyBasis,
    RateConfiguration,
    TradeType,
    foreign_currency,
    native_currency,
)


CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places for display and storage."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Quote:
    """Result of pricing one trade request. All amounts rounded to 2 dp."""
    trade_type: TradeType
    basis: CurrencyBasis
    amount: Decimal
    amount_currency: Currency
    rate: Decimal
    commission_rate: Decimal
    equivalent_amount: Decimal
    equivalent_currency: Currency
    commission_amount: Decimal
    commission_currency: Currency
    final_amount: Decimal
    final_currency: Currency

    @property
    def native_amount(self) -> Decimal:
        """The quoted amount expressed in the trade type's native currency."""
        if self.basis == CurrencyBasis.NATIVE:
            return self.amount
        return self.equivalent_amount

    def to_dict(self) -> dict:
        return {
            "type": self.trade_type.value,
            "basis": self.basis.value,
            "amount": str(self.amount),
            "amount_currency": self.amount_currency.value,
            "rate": str(self.rate),
            "commission_rate": str(self.commission_rate),
            "equivalent_amount": str(self.equivalent_amount),
            "equivalent_currency": self.equivalent_currency.value,
            "commission_amount": str(self.commission_amount),
            "commission_currency": self.commission_currency.value,
            "final_amount": str(self.final_amount),
            "final_currency": self.final_currency.value,
        }


def _converts_by_multiplying(trade_type: TradeType, basis: CurrencyBasis) -> bool:
    # USDT -> JOD multiplies by the rate, JOD -> USDT divides.
    # The typed currency is USDT for buy/foreign and sell/native.
    return (trade_type == TradeType.BUY) == (basis == CurrencyBasis.FOREIGN)


def convert(amount: Decimal, rate: Decimal, trade_type: TradeType, basis: CurrencyBasis) -> Decimal:
    """Convert `amount` typed in `basis` to the other side of the pair (unrounded)."""
    if _converts_by_multiplying(trade_type, basis):
        return amount * rate
    return amount / rate


def calculate_quote(
    amount: Decimal,
    trade_type: TradeType,
    basis: CurrencyBasis,
    rates: RateConfiguration,
) -> Quote:
    """
    Price a trade request against an explicit rate configuration.

    Args:
        amount: Amount typed by the user (positive, validated upstream)
        trade_type: BUY or SELL
        basis: Which currency `amount` is expressed in
        rates: Configuration read at request time

    Returns:
        Quote with equivalent, commission and final amounts (2 dp)
    """
    rate = rates.rate_for(trade_type)
    commission_rate = rates.commission_for(trade_type)

    equivalent = convert(amount, rate, trade_type, basis)
    commission = equivalent * commission_rate

    if trade_type == TradeType.BUY and basis == CurrencyBasis.FOREIGN:
        final = equivalent * (1 + commission_rate)
    elif trade_type == TradeType.BUY:
        final = equivalent * (1 - commission_rate)
    elif basis == CurrencyBasis.FOREIGN:
        final = equivalent + commission
    else:
        final = equivalent - commission

    if basis == CurrencyBasis.NATIVE:
        typed_currency = native_currency(trade_type)
        other_currency = foreign_currency(trade_type)
    else:
        typed_currency = foreign_currency(trade_type)
        other_currency = native_currency(trade_type)

    return Quote(
        trade_type=trade_type,
        basis=basis,
        amount=amount,
        amount_currency=typed_currency,
        rate=rate,
        commission_rate=commission_rate,
        equivalent_amount=round_money(equivalent),
        equivalent_currency=other_currency,
        commission_amount=round_money(commission),
        commission_currency=other_currency,
        final_amount=round_money(final),
        final_currency=other_currency,
    )


def to_native_amount(
    amount: Decimal,
    trade_type: TradeType,
    basis: CurrencyBasis,
    rate: Decimal,
) -> Decimal:
    """Express `amount` in the native currency of `trade_type` (2 dp)."""
    if basis == CurrencyBasis.NATIVE:
        return round_money(amount)
    return round_money(convert(amount, rate, trade_type, basis))


def to_foreign_amount(
    amount: Decimal,
    trade_type: TradeType,
    basis: CurrencyBasis,
    rate: Decimal,
) -> Decimal:
    """Express `amount` in the foreign currency of `trade_type` (2 dp)."""
    if basis == CurrencyBasis.FOREIGN:
        return round_money(amount)
    return round_money(convert(amount, rate, trade_type, basis))


def native_fee(native_amount: Decimal, commission_rate: Decimal) -> Decimal:
    """Commission charged on a native amount, in the native currency."""
    return round_money(native_amount * commission_rate)
