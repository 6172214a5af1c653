"""
Business views: create, read, update, delete, switch, and member management.

Every route with a ``business_id`` kwarg passes through the business context
match first, except the switch endpoint which exists to change the context.
"""
import logging
import re
from urllib.parse import urlparse

from django.conf import settings
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.businesses import actions
from apps.businesses.data import BusinessData
from apps.businesses.exceptions import InvalidBusinessOperation
from apps.businesses.permissions import BusinessPolicyPermission
from apps.businesses.serializers import (
    BusinessInputSerializer,
    BusinessSerializer,
    MemberInviteSerializer,
    RoleAssignmentSerializer,
)
from apps.core.models import Business
from apps.core.services import membership
from apps.core.services.roles import RoleStore
from apps.core.services.tenant_resolver import get_resolver

logger = logging.getLogger(__name__)

# Pages showing one business' data; switching away from them lands on the dashboard
BUSINESS_SPECIFIC_PATTERNS = [
    re.compile(r'^/businesses/\d+(/|$)'),
]


def is_business_specific_path(path: str) -> bool:
    return any(pattern.search(path or '') for pattern in BUSINESS_SPECIFIC_PATTERNS)


def redirect_after_switch(referer: str) -> str:
    """
    Where to send the user after switching business.

    Business-specific pages would show the previous business' data, so those
    go to the landing page; anything else reloads the referring page.
    """
    landing = settings.APP_SETTINGS.tenancy.landing_path
    if not referer:
        return landing
    path = urlparse(referer).path
    if is_business_specific_path(path):
        return landing
    return path or landing


class BusinessObjectMixin:
    permission_classes = [BusinessPolicyPermission]
    business_action = None

    def get_business(self, request, business_id):
        """
        Load the business and apply the policy for this request.

        Raises:
            Http404: unknown business id
            PermissionDenied: the policy refuses the action (DRF answers 403)
        """
        business = get_object_or_404(Business, pk=business_id)
        self.check_object_permissions(request, business)
        return business


class BusinessListView(APIView):
    """
    GET /businesses - Businesses the user owns or belongs to
    POST /businesses - Create a business and make it the current one
    Frontend expects: { businesses: [...] } for GET,
    { business: {...}, redirect, message } for POST
    """

    def get(self, request):
        businesses = membership.accessible_businesses(request.user)
        return Response({
            'businesses': BusinessSerializer(businesses, many=True).data,
        }, status=status.HTTP_200_OK)

    def post(self, request):
        """
        Create a business owned by the requesting user.

        Request body:
        - name: Business name (1-255 characters, not blank)

        The new business becomes the current one and the URL stored before the
        user was sent to the creation page is returned as ``redirect``.
        """
        serializer = BusinessInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        resolver = get_resolver(request)
        business = actions.create_business(request.user, BusinessData(**serializer.validated_data), resolver)

        # The new business becomes the current context
        resolver.set_current_business(business)

        config = settings.APP_SETTINGS.tenancy
        redirect = request.session.pop(config.intended_url_key, None) or config.landing_path

        return Response({
            'business': BusinessSerializer(business).data,
            'redirect': redirect,
            'message': 'Business created successfully',
        }, status=status.HTTP_201_CREATED)


class BusinessCreateView(APIView):
    """
    GET /businesses/create
    Data for the creation form. Users without any business are sent here.
    """

    def get(self, request):
        config = settings.APP_SETTINGS.tenancy
        return Response({
            'intendedUrl': request.session.get(config.intended_url_key),
            'hasBusinesses': membership.accessible_businesses(request.user).exists(),
        }, status=status.HTTP_200_OK)


class BusinessDetailView(BusinessObjectMixin, APIView):
    """
    GET /businesses/{id} - Business details (view policy)
    PATCH /businesses/{id} - Rename (update policy)
    DELETE /businesses/{id} - Delete with members and roles (delete policy)
    """

    def get(self, request, business_id):
        business = self.get_business(request, business_id)
        return Response({'business': BusinessSerializer(business).data}, status=status.HTTP_200_OK)

    def patch(self, request, business_id):
        business = self.get_business(request, business_id)

        serializer = BusinessInputSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        business = actions.update_business(business, BusinessData(**serializer.validated_data))
        return Response({
            'business': BusinessSerializer(business).data,
            'message': 'Business updated successfully',
        }, status=status.HTTP_200_OK)

    def delete(self, request, business_id):
        business = self.get_business(request, business_id)
        actions.delete_business(business, get_resolver(request))
        return Response({
            'redirect': settings.APP_SETTINGS.tenancy.landing_path,
            'message': 'Business deleted successfully',
        }, status=status.HTTP_200_OK)


class BusinessSwitchView(APIView):
    """
    POST /businesses/{id}/switch
    Switch the current business. Responds with where to go next.
    """

    def post(self, request, business_id):
        """
        Switch to the business if the user is a member of it.

        Headers:
        - Referer: Page the switch was made from, used to pick ``redirect``
        """
        business = get_object_or_404(Business, pk=business_id)

        try:
            actions.switch_business(request.user, business, get_resolver(request))
        except InvalidBusinessOperation as e:
            logger.warning(f'[BUSINESS] Switch refused for user {request.user.pk}: {e}')
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response({
            'business': BusinessSerializer(business).data,
            'redirect': redirect_after_switch(request.headers.get('Referer', '')),
            'message': f'Switched to {business.name}',
        }, status=status.HTTP_200_OK)


class MemberListView(BusinessObjectMixin, APIView):
    """
    GET /businesses/{id}/members - Members with their business roles (view policy)
    POST /businesses/{id}/members - Invite an existing user { userId, role? } (update policy)
    """

    def get_permissions(self):
        self.business_action = 'view' if self.request.method == 'GET' else 'update'
        return super().get_permissions()

    def get(self, request, business_id):
        business = self.get_business(request, business_id)
        roles = RoleStore()
        members = [
            {
                'id': user.pk,
                'username': user.get_username(),
                'isOwner': user.pk == business.owner_id,
                'roles': sorted(roles.roles_in(user, business)),
            }
            for user in business.members.order_by('id')
        ]
        return Response({'members': members}, status=status.HTTP_200_OK)

    def post(self, request, business_id):
        """
        Invite an existing user.

        Request body:
        - userId: Id of the user to add
        - role: Business role (optional, defaults to the configured member role;
          "owner" is refused with 400)
        """
        business = self.get_business(request, business_id)

        serializer = MemberInviteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        user = get_object_or_404(get_user_model(), pk=serializer.validated_data['userId'])
        role = serializer.validated_data.get('role')

        try:
            actions.invite_member(business, user, role)
        except InvalidBusinessOperation as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'message': 'Member added successfully'}, status=status.HTTP_201_CREATED)


class MemberDetailView(BusinessObjectMixin, APIView):
    """
    DELETE /businesses/{id}/members/{user_id} - Remove a member (update policy)
    """
    business_action = 'update'

    def delete(self, request, business_id, user_id):
        business = self.get_business(request, business_id)
        user = get_object_or_404(get_user_model(), pk=user_id)

        try:
            actions.remove_member(business, user)
        except InvalidBusinessOperation as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'message': 'Member removed successfully'}, status=status.HTTP_200_OK)


class MemberRoleView(BusinessObjectMixin, APIView):
    """
    PUT /businesses/{id}/members/{user_id}/role - Replace a member's role { role } (update policy)
    """
    business_action = 'update'

    def put(self, request, business_id, user_id):
        business = self.get_business(request, business_id)
        user = get_object_or_404(get_user_model(), pk=user_id)

        serializer = RoleAssignmentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        try:
            actions.assign_role(business, user, serializer.validated_data['role'])
        except InvalidBusinessOperation as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({'message': 'Role updated successfully'}, status=status.HTTP_200_OK)
