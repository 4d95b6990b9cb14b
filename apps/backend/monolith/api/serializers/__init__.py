"""
API Serializers Package.

Exports all serializers for the API.
"""

from .notifications import NotificationSerializer
from .settings import RateConfigurationSerializer
from .transactions import (
    AdminTransactionSerializer,
    EnumValueField,
    TransactionSerializer,
)


__all__ = [
    "AdminTransactionSerializer",
    "EnumValueField",
    "NotificationSerializer",
    "RateConfigurationSerializer",
    "TransactionSerializer",
]
