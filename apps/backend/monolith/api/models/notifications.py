"""Durable user notifications."""

from django.conf import settings
from django.db import models

from apps.backend.core.domain.exchange import NotificationType

from .base import TimestampMixin


class Notification(TimestampMixin):
    """A message to one user about a ledger or KYC event."""

    TYPES = [(t.value, t.value.replace("_", " ").title()) for t in NotificationType]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=20, choices=TYPES)
    message = models.TextField()
    related_id = models.PositiveIntegerField(blank=True, null=True)
    read = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "read"], name="api_notif_user_read_idx"),
        ]

    def __str__(self):
        return f"{self.type} -> {self.user_id}"
