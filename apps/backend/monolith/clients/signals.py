"""
Signals for clients app.

Announce newly created users so admins get a `new_user` notification.
"""

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver


@receiver(post_save, sender='clients.CustomUser')
def announce_user_on_creation(sender, instance, created, raw=False, **kwargs):
    """
    Publish UserRegistered once the creating transaction commits.

    Fixture loading (`raw`) is skipped. Notification failures are logged
    by the message bus and never break account creation.
    """
    if not created or raw:
        return

    from apps.backend.core.wiring.container import get_announce_registration_uc

    user_id, email = instance.pk, instance.email
    transaction.on_commit(
        lambda: get_announce_registration_uc().execute(user_id, email=email)
    )
