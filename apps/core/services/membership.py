"""
Membership and role queries.

Read-only predicates answering "is user X a member/owner/role-holder of
business Y". None of these write, and none depend on a live request.
"""
import logging
from typing import Optional, Set, Union

from django.conf import settings
from django.db.models import Q, QuerySet

from apps.core.models import Business, BusinessUser, RoleAssignment
from apps.core.services.roles import GLOBAL, RoleStore
from apps.core.services.tenant_resolver import TenantResolver

logger = logging.getLogger(__name__)

BusinessRef = Union[Business, int]


def _business_id(business: BusinessRef) -> int:
    return business.pk if isinstance(business, Business) else int(business)


def _authenticated(user) -> bool:
    return user is not None and getattr(user, 'is_authenticated', False)


def is_member_of(user, business: BusinessRef) -> bool:
    if not _authenticated(user):
        return False
    return BusinessUser.objects.filter(user=user, business_id=_business_id(business)).exists()


def is_owner_of(user, business: BusinessRef) -> bool:
    if not _authenticated(user):
        return False
    if isinstance(business, Business):
        return business.owner_id == user.pk
    return Business.objects.filter(pk=business, owner=user).exists()


def has_global_role(user, role_name: str) -> bool:
    return RoleStore().has(user, role_name, scope=GLOBAL)


def has_tenant_role(user, role_name: str, business: BusinessRef,
                    resolver: Optional[TenantResolver] = None) -> bool:
    """
    Check a business-scoped role.

    The resolver's scope is switched to ``business`` for the duration of the
    check and restored afterwards, so an ambient scope set by the caller is
    left untouched.
    """
    roles = RoleStore(resolver)
    with roles.resolver.using_scope(_business_id(business)):
        return roles.has(user, role_name)


def is_platform_user(user) -> bool:
    """True iff the user holds at least one global role."""
    if not _authenticated(user):
        return False
    return RoleAssignment.objects.filter(user=user, role__business__isnull=True).exists()


def global_roles(user) -> Set[str]:
    return RoleStore().list_global(user)


def can_access_business(user, business: BusinessRef) -> bool:
    """Owner, member, or holder of the global super-admin role."""
    if not _authenticated(user):
        return False
    if has_global_role(user, settings.APP_SETTINGS.tenancy.super_admin_role):
        return True
    if is_owner_of(user, business):
        return True
    return is_member_of(user, business)


def owned_businesses(user) -> QuerySet:
    if not _authenticated(user):
        return Business.objects.none()
    return Business.objects.filter(owner=user).order_by('id')


def member_businesses(user) -> QuerySet:
    if not _authenticated(user):
        return Business.objects.none()
    return Business.objects.filter(members=user).order_by('id')


def accessible_businesses(user) -> QuerySet:
    """Businesses the user may switch to: owned or member of."""
    if not _authenticated(user):
        return Business.objects.none()
    return Business.objects.filter(Q(owner=user) | Q(members=user)).distinct().order_by('id')
