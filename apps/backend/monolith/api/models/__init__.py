# api/models/__init__.py
"""
Import all models so `from api.models import X` keeps working.
"""

from .base import TimestampMixin
from .exchange import PlatformSetting, Transaction
from .notifications import Notification

__all__ = [
    "TimestampMixin",
    "Transaction",
    "PlatformSetting",
    "Notification",
]
