"""
User model for the exchange desk.

CustomUser extends Django's user with the profile the exchange engine
reads: verification state, loyalty points and the receiving details used
to settle trades (USDT wallet for buys, CliQ for sells).
"""

from django.db import models
from django.contrib.auth.models import AbstractUser
from typing import Optional

from apps.backend.core.domain.exchange import (
    CliqType,
    KycStatus,
    Network,
    UserProfile,
)


class CustomUser(AbstractUser):
    """
    Extended user model.

    `role` drives platform permissions: admins review trades and KYC,
    regular users trade.
    """

    ROLE_USER = "user"
    ROLE_ADMIN = "admin"
    ROLES = [
        (ROLE_USER, "User"),
        (ROLE_ADMIN, "Admin"),
    ]
    KYC_STATUSES = [(s.value, s.value.title()) for s in KycStatus]
    NETWORKS = [(n.value, n.value.upper()) for n in Network]
    CLIQ_TYPES = [(c.value, c.value.title()) for c in CliqType]

    full_name = models.CharField(max_length=150, blank=True)
    role = models.CharField(max_length=10, choices=ROLES, default=ROLE_USER)

    # Verification
    mobile_number = models.CharField(max_length=10, blank=True, null=True, unique=True)
    mobile_verified = models.BooleanField(default=False)
    kyc_status = models.CharField(
        max_length=10, choices=KYC_STATUSES, default=KycStatus.PENDING.value
    )
    kyc_document = models.CharField(max_length=255, blank=True)

    loyalty_points = models.PositiveIntegerField(default=0)

    # USDT receiving details (buy settlement)
    usdt_address = models.CharField(max_length=100, blank=True)
    usdt_network = models.CharField(max_length=10, choices=NETWORKS, blank=True, null=True)

    # CliQ receiving details (sell settlement)
    cliq_bank_name = models.CharField(max_length=100, blank=True)
    cliq_type = models.CharField(max_length=10, choices=CLIQ_TYPES, blank=True, null=True)
    cliq_alias = models.CharField(max_length=10, blank=True)
    cliq_number = models.CharField(max_length=14, blank=True)
    cliq_account_holder = models.CharField(max_length=150, blank=True)

    # Bank account
    bank_name = models.CharField(max_length=100, blank=True)
    bank_branch = models.CharField(max_length=100, blank=True)
    bank_account_name = models.CharField(max_length=150, blank=True)
    bank_account_number = models.CharField(max_length=50, blank=True)
    bank_iban = models.CharField(max_length=34, blank=True)

    def __str__(self):
        return self.username

    @property
    def is_platform_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN or self.is_staff

    @property
    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username

    def to_profile(self) -> UserProfile:
        """Snapshot the fields the exchange engine reads."""
        return UserProfile(
            id=self.pk,
            username=self.username,
            role=self.ROLE_ADMIN if self.is_platform_admin else self.role,
            full_name=self.display_name,
            mobile_verified=self.mobile_verified,
            kyc_status=KycStatus(self.kyc_status),
            loyalty_points=self.loyalty_points,
            usdt_address=self.usdt_address or None,
            usdt_network=_enum_or_none(Network, self.usdt_network),
            cliq_type=_enum_or_none(CliqType, self.cliq_type),
            cliq_alias=self.cliq_alias or None,
            cliq_number=self.cliq_number or None,
        )


def _enum_or_none(enum_cls, value: Optional[str]):
    return enum_cls(value) if value else None
