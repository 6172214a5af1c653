"""
Business actions.

Each action mutates memberships, roles and the business context together.
Preconditions are checked before any write and raise
``InvalidBusinessOperation``; actions with several writes run inside a
single ``transaction.atomic()`` block so a failure leaves nothing behind.

Authorization (who may call an action) is the caller's job, see
``apps.businesses.policies``.
"""
import logging
from typing import Optional

from django.conf import settings
from django.db import transaction

from apps.businesses.data import BusinessData
from apps.businesses.exceptions import InvalidBusinessOperation
from apps.core.models import Business, BusinessUser, Role
from apps.core.services import membership
from apps.core.services.roles import RoleStore
from apps.core.services.tenant_resolver import TenantResolver

logger = logging.getLogger(__name__)


def _owner_role() -> str:
    return settings.APP_SETTINGS.tenancy.owner_role


def _attach(business: Business, user) -> None:
    BusinessUser.objects.get_or_create(business=business, user=user)


def create_business(user, data: BusinessData, resolver: Optional[TenantResolver] = None) -> Business:
    """
    Create a business owned by ``user``.

    The owner is attached as a member and granted the business-scoped owner
    role.
    """
    roles = RoleStore(resolver)

    with transaction.atomic():
        business = Business.objects.create(name=data.name, owner=user)
        _attach(business, user)

        with roles.resolver.using_scope(business):
            roles.ensure_role(_owner_role())
            roles.grant(user, _owner_role())

    logger.info(f'[BUSINESS] User {user.pk} created business {business.pk}')
    return business


def update_business(business: Business, data: BusinessData) -> Business:
    business.name = data.name
    business.save(update_fields=['name', 'updated_at'])
    business.refresh_from_db()
    return business


def delete_business(business: Business, resolver: Optional[TenantResolver] = None) -> None:
    """
    Delete a business with its memberships and business-scoped roles.

    If ``resolver`` currently points at the business, its context is cleared.
    """
    business_id = business.pk

    with transaction.atomic():
        BusinessUser.objects.filter(business_id=business_id).delete()
        # Deleting the roles cascades to their assignments
        Role.objects.filter(business_id=business_id).delete()
        business.delete()

    if resolver is not None and resolver.current_business_id == business_id:
        resolver.set_current_business(None)

    logger.info(f'[BUSINESS] Deleted business {business_id}')


def invite_member(business: Business, user, role_name: Optional[str] = None) -> None:
    """
    Add ``user`` to the business with ``role_name`` (default member role).

    An existing member keeps their membership; their previous non-owner role
    is replaced so they hold exactly one.

    Args:
        business: Business to join
        user: Existing user to add
        role_name: Business role, defaults to the configured member role

    Raises:
        InvalidBusinessOperation: for the owner role or the business owner
    """
    role_name = role_name or settings.APP_SETTINGS.tenancy.default_member_role

    if role_name == _owner_role():
        raise InvalidBusinessOperation('Cannot invite a member with the owner role.')
    if membership.is_owner_of(user, business):
        raise InvalidBusinessOperation('Cannot change owner role.')

    roles = RoleStore()

    with transaction.atomic():
        _attach(business, user)
        roles.revoke_scoped(user, business, keep=[_owner_role()])
        roles.ensure_role(role_name, business)
        roles.grant(user, role_name, business)

    logger.info(f'[BUSINESS] User {user.pk} joined business {business.pk} as {role_name}')


def remove_member(business: Business, user) -> None:
    """Remove ``user`` and every business-scoped role they hold. The owner cannot be removed."""
    if membership.is_owner_of(user, business):
        raise InvalidBusinessOperation('Cannot remove the business owner.')

    roles = RoleStore()

    with transaction.atomic():
        roles.revoke_scoped(user, business)
        BusinessUser.objects.filter(business=business, user=user).delete()

    logger.info(f'[BUSINESS] User {user.pk} removed from business {business.pk}')


def assign_role(business: Business, user, role_name: str) -> None:
    """
    Replace the member's business role with ``role_name``.

    Args:
        business: Business the role is scoped to
        user: Member whose role changes
        role_name: New business role

    Raises:
        InvalidBusinessOperation: if ``user`` is not a member, is the owner,
            or ``role_name`` is the owner role
    """
    if not membership.is_member_of(user, business):
        raise InvalidBusinessOperation('User is not a member of this business.')
    if membership.is_owner_of(user, business) or role_name == _owner_role():
        raise InvalidBusinessOperation('Cannot change owner role.')

    roles = RoleStore()

    with transaction.atomic():
        roles.revoke_scoped(user, business, keep=[_owner_role()])
        roles.ensure_role(role_name, business)
        roles.grant(user, role_name, business)

    logger.info(f'[BUSINESS] User {user.pk} now has role {role_name} in business {business.pk}')


def switch_business(user, business: Business, resolver: TenantResolver) -> None:
    """
    Make ``business`` the current business.

    Raises:
        InvalidBusinessOperation: if ``user`` is not a member; the context is
            left unchanged
    """
    if not membership.is_member_of(user, business):
        raise InvalidBusinessOperation('User does not have access to this business.')

    resolver.set_current_business(business)
    logger.info(f'[BUSINESS] User {user.pk} switched to business {business.pk}')
