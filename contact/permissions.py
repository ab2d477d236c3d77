"""
Contact Management Permissions

Dashboard access is limited to staff accounts.
"""
from rest_framework import permissions


class IsDashboardOperator(permissions.BasePermission):
    """
    Permission for dashboard operators to manage contact submissions.
    """

    message = 'Dashboard access requires an operator account.'

    def has_permission(self, request, view):
        """Check if user is authenticated and is staff."""
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_staff
        )
