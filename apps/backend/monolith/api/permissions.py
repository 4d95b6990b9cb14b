"""
DRF permissions for the exchange desk.
"""

from rest_framework.permissions import BasePermission


class IsPlatformAdmin(BasePermission):
    """
    Allows access only to platform admins (`role == "admin"` or staff).
    """

    message = 'Admin access required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and getattr(user, 'is_platform_admin', False)
        )
