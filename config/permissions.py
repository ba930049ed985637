# config/permissions.py

from django.conf import settings
from rest_framework import permissions


class IsStaffUser(permissions.BasePermission):
    """
    Permission class that only allows authenticated staff users.
    """
    message = 'Only staff members can perform this action.'

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_staff
        )


class CanChangeTableState(IsStaffUser):
    """
    Permission class for table assign/release.
    Open to everyone unless OCCUPANCY_MUTATIONS_REQUIRE_STAFF is enabled.
    """

    def has_permission(self, request, view):
        if not getattr(settings, 'OCCUPANCY_MUTATIONS_REQUIRE_STAFF', False):
            return True
        return super().has_permission(request, view)
