"""
Authorization policies.

Plain functions of (actor, subject) returning True/False. They only read
memberships and roles, so they can be called from views, management commands
and tests alike.
"""
from typing import Optional

from django.conf import settings

from apps.core.models import Business
from apps.core.services.membership import (
    has_global_role,
    has_tenant_role,
    is_member_of,
    is_owner_of,
)
from apps.core.services.tenant_resolver import TenantResolver


def _config():
    return settings.APP_SETTINGS.tenancy


def _is_super_admin(user) -> bool:
    return has_global_role(user, _config().super_admin_role)


# ==========================
# BUSINESSES
# ==========================

def can_view_business(user, business: Business) -> bool:
    if is_member_of(user, business):
        return True
    return _is_super_admin(user)


def can_update_business(user, business: Business, resolver: Optional[TenantResolver] = None) -> bool:
    if is_owner_of(user, business):
        return True
    if has_tenant_role(user, _config().business_admin_role, business, resolver):
        return True
    return _is_super_admin(user)


def can_delete_business(user, business: Business) -> bool:
    if is_owner_of(user, business):
        return True
    return _is_super_admin(user)


# ==========================
# PLATFORM
# ==========================

def can_view_platform_dashboard(user) -> bool:
    return any(has_global_role(user, role) for role in _config().platform_dashboard_roles)


def _is_platform_admin(user) -> bool:
    return _is_super_admin(user) or has_global_role(user, _config().platform_admin_role)


def can_view_any_users(user) -> bool:
    return _is_platform_admin(user)


def can_view_user(user, model) -> bool:
    if user.pk == model.pk:
        return True
    return _is_platform_admin(user)


def can_create_users(user) -> bool:
    return _is_platform_admin(user)


def can_update_user(user, model) -> bool:
    if user.pk == model.pk:
        return True
    return _is_platform_admin(user)


def can_delete_user(user, model) -> bool:
    return user.pk != model.pk and _is_platform_admin(user)
