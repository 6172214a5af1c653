"""
Tenant data shared with the presentation layer on every request.

Read-only. Requires the tenant context middleware to have run, so the
current business reflects the assigned (and validated) context.
"""
from apps.core.services import membership
from apps.core.services.tenant_resolver import get_resolver


def business_payload(business):
    if business is None:
        return None
    return {
        'id': business.pk,
        'name': business.name,
        'ownerId': business.owner_id,
    }


def shared_tenancy_data(request) -> dict:
    """Current business, accessible businesses and platform flags as plain data."""
    user = getattr(request, 'user', None)
    resolver = get_resolver(request)
    return {
        'auth': {
            'user': {'id': user.pk, 'username': user.get_username()} if user is not None and user.is_authenticated else None,
            'isPlatformUser': membership.is_platform_user(user),
            'globalRoles': sorted(membership.global_roles(user)),
        },
        'currentBusiness': business_payload(resolver.get_current_business()),
        'businesses': [business_payload(b) for b in membership.accessible_businesses(user)],
    }

