"""Ledger and platform-settings models for the USDT/JOD exchange desk."""

from __future__ import annotations

from django.conf import settings
from django.db import models

from apps.backend.core.domain.exchange import (
    CliqType,
    CurrencyBasis,
    Network,
    PaymentMethod,
    TradeType,
    TransactionStatus,
    native_currency,
)

from .base import TimestampMixin


def _choices(enum_cls):
    return [(member.value, member.value.replace("_", " ").title()) for member in enum_cls]


class Transaction(TimestampMixin):
    """
    A buy or sell request with its pricing captured at submission.

    `amount` is always in the native currency of the trade type
    (JOD for buy, USDT for sell).
    """

    TRADE_TYPES = _choices(TradeType)
    STATUSES = _choices(TransactionStatus)
    BASES = _choices(CurrencyBasis)
    NETWORKS = _choices(Network)
    PAYMENT_METHODS = _choices(PaymentMethod)
    CLIQ_TYPES = _choices(CliqType)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    type = models.CharField(max_length=4, choices=TRADE_TYPES)
    amount = models.DecimalField(max_digits=20, decimal_places=2)
    rate = models.DecimalField(max_digits=20, decimal_places=8)
    commission = models.DecimalField(
        max_digits=7,
        decimal_places=6,
        default=0,
        help_text="Commission fraction in effect at submission",
    )
    fee = models.DecimalField(
        max_digits=20,
        decimal_places=2,
        default=0,
        help_text="Commission amount in the native currency",
    )
    basis = models.CharField(max_length=7, choices=BASES, default=CurrencyBasis.NATIVE.value)
    final_amount = models.DecimalField(max_digits=20, decimal_places=2)
    status = models.CharField(
        max_length=10,
        choices=STATUSES,
        default=TransactionStatus.PENDING.value,
        db_index=True,
    )
    proof_of_payment = models.CharField(max_length=255)

    network = models.CharField(max_length=10, choices=NETWORKS, blank=True, null=True)
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHODS, blank=True, null=True)

    cliq_type = models.CharField(max_length=10, choices=CLIQ_TYPES, blank=True, null=True)
    cliq_alias = models.CharField(max_length=20, blank=True, null=True)
    cliq_number = models.CharField(max_length=20, blank=True, null=True)

    approved_at = models.DateTimeField(blank=True, null=True)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="approved_transactions",
    )

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="api_txn_user_created_idx"),
        ]

    def __str__(self):
        return f"{self.type} {self.amount} {self.currency} ({self.status})"

    @property
    def currency(self) -> str:
        return native_currency(TradeType(self.type)).value


class PlatformSetting(models.Model):
    """One key of the platform rate configuration."""

    key = models.CharField(max_length=64, unique=True)
    value = models.TextField(blank=True, default="")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}={self.value}"
