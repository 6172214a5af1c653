"""
DRF permission classes backed by the business policies.
"""
from rest_framework import permissions

from apps.businesses import policies
from apps.core.services.tenant_resolver import get_resolver


class BusinessPolicyPermission(permissions.BasePermission):
    """
    Object permission for a business, chosen by HTTP method.

    Reads need the view policy, PUT/PATCH and member management need the
    update policy, DELETE needs the delete policy.
    """

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        """
        Args:
            request: DRF request
            view: View instance; ``view.business_action`` overrides the method mapping
            obj: The Business being accessed

        Returns:
            bool: True if the policy allows the action
        """
        action = getattr(view, 'business_action', None) or self._action_for(request.method)
        if action == 'view':
            return policies.can_view_business(request.user, obj)
        if action == 'update':
            return policies.can_update_business(request.user, obj, get_resolver(request))
        if action == 'delete':
            return policies.can_delete_business(request.user, obj)
        return False

    @staticmethod
    def _action_for(method):
        if method in permissions.SAFE_METHODS:
            return 'view'
        if method == 'DELETE':
            return 'delete'
        return 'update'


class CanViewPlatformDashboard(permissions.BasePermission):
    """Holders of a global super-admin, admin or manager role."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated
                    and policies.can_view_platform_dashboard(request.user))


class CanViewAnyUsers(permissions.BasePermission):

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated
                    and policies.can_view_any_users(request.user))
