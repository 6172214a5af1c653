"""Template context processors."""
from django.utils.functional import SimpleLazyObject

from apps.core.services import membership
from apps.core.services.tenant_resolver import get_resolver


def _lazy_list(func):
    return SimpleLazyObject(lambda: list(func()))


def tenancy(request):
    """Current business, accessible businesses and platform flags, evaluated on first use."""
    user = getattr(request, 'user', None)
    resolver = get_resolver(request)
    return {
        'current_business': SimpleLazyObject(resolver.get_current_business),
        'businesses': _lazy_list(lambda: membership.accessible_businesses(user)),
        'is_platform_user': SimpleLazyObject(lambda: membership.is_platform_user(user)),
        'global_roles': _lazy_list(lambda: sorted(membership.global_roles(user))),
    }
