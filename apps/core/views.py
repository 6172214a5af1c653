"""
Landing page and shared tenancy data views.
"""
from django.contrib.messages import get_messages
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.sharing import shared_tenancy_data


def _flash_messages(request):
    return [
        {'level': message.level_tag, 'message': message.message}
        for message in get_messages(request)
    ]


class DashboardView(APIView):
    """
    GET /dashboard
    Default landing page. Carries the tenancy data and any flash messages
    left by a context redirect (access denied, context mismatch).
    """

    def get(self, request):
        data = shared_tenancy_data(request)
        data['messages'] = _flash_messages(request._request)
        return Response(data, status=status.HTTP_200_OK)


class TenancyContextView(APIView):
    """
    GET /api/context
    Frontend expects: { auth: { user, isPlatformUser, globalRoles }, currentBusiness, businesses }
    """

    def get(self, request):
        return Response(shared_tenancy_data(request), status=status.HTTP_200_OK)
