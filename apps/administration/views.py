"""
Platform administration views.

Only platform users (holders of a global role) reach these; tenant users are
refused by the policy-backed permission classes.
"""
import logging

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.businesses.permissions import CanViewAnyUsers, CanViewPlatformDashboard
from apps.core.models import Business, Role
from apps.core.services import membership

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


def get_platform_stats() -> dict:
    """
    Count users, businesses and roles across all businesses.

    Returns:
        dict: totals plus the split between platform and tenant users
    """
    User = get_user_model()
    return {
        'totalUsers': User.objects.count(),
        'totalBusinesses': Business.objects.count(),
        'totalRoles': Role.objects.count(),
        'platformUsers': User.objects.filter(
            role_assignments__role__business__isnull=True
        ).distinct().count(),
        'tenantUsers': User.objects.filter(
            role_assignments__role__business__isnull=False
        ).distinct().count(),
    }


class PlatformDashboardView(APIView):
    """
    GET /api/admin/dashboard
    Frontend expects: { stats: {...}, recentUsers: [...], recentBusinesses: [...] }
    """
    permission_classes = [CanViewPlatformDashboard]

    def get(self, request):
        User = get_user_model()

        recent_users = [
            {
                'id': user.pk,
                'username': user.get_username(),
                'email': user.email,
                'createdAt': user.date_joined,
            }
            for user in User.objects.order_by('-date_joined', '-pk')[:RECENT_LIMIT]
        ]
        recent_businesses = [
            {
                'id': business.pk,
                'name': business.name,
                'owner': {'id': business.owner_id, 'username': business.owner.get_username()},
                'createdAt': business.created_at,
            }
            for business in Business.objects.select_related('owner').order_by('-created_at', '-pk')[:RECENT_LIMIT]
        ]

        return Response({
            'stats': get_platform_stats(),
            'recentUsers': recent_users,
            'recentBusinesses': recent_businesses,
        }, status=status.HTTP_200_OK)


class UserListView(APIView):
    """
    GET /api/admin/users
    All users with their global roles. Requires a global super-admin or admin role.
    """
    permission_classes = [CanViewAnyUsers]

    def get(self, request):
        User = get_user_model()
        users = [
            {
                'id': user.pk,
                'username': user.get_username(),
                'email': user.email,
                'isPlatformUser': membership.is_platform_user(user),
                'globalRoles': sorted(membership.global_roles(user)),
            }
            for user in User.objects.order_by('id')
        ]
        return Response({'users': users, 'total': len(users)}, status=status.HTTP_200_OK)
