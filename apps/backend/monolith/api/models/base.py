# api/models/base.py
"""
Base mixins shared by the exchange models.
"""

from django.db import models
from django.utils import timezone


class TimestampMixin(models.Model):
    """
    Creation and update timestamps.

    `created_at` defaults to now but may be supplied by the caller, so the
    engine's clock stays the source of truth for ledger records.
    """
    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Record creation timestamp"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Last update timestamp"
    )

    class Meta:
        abstract = True

    @property
    def age(self):
        """Returns the age of the record"""
        return timezone.now() - self.created_at
