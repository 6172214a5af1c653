"""
Tenant middleware for session-based business context.

Two steps, in this order:

1. ``SetTenantContextMiddleware`` makes sure every authenticated user who is
   not a platform user has a valid current business in the session, fixing
   up revoked access and auto-assigning a default business.
2. ``EnsureBusinessContextMatchMiddleware`` checks that a route's business
   (``<int:business_id>`` URL kwarg) agrees with the session's business.

The decision logic lives in ``assign_tenant_context`` and
``match_business_context``, which return ``Continue`` or ``RedirectTo``.
"""
import logging
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from apps.core.middleware.results import Continue, ContextResult, Notice, RedirectTo, to_response
from apps.core.models import Business
from apps.core.services import membership
from apps.core.services.tenant_resolver import TenantResolver

logger = logging.getLogger(__name__)

ACCESS_DENIED_MESSAGE = 'You do not have access to this business.'
MISMATCH_MESSAGE = 'Business context mismatch. Returned to your current business context.'


def _default_business(user) -> Optional[Business]:
    """First owned business, else first business the user is a member of."""
    business = membership.owned_businesses(user).first()
    if business is None:
        business = membership.member_businesses(user).first()
    return business


def assign_tenant_context(user, resolver: TenantResolver, request_path: str,
                          request_url: Optional[str] = None) -> ContextResult:
    """
    Ensure ``resolver`` holds a business the user may access.

    Args:
        user: The request user (may be anonymous)
        resolver: The request's tenant resolver
        request_path: Path of the current request, used for the create/list exemption
        request_url: Full URL stored as the post-creation redirect target

    Returns:
        Continue, or RedirectTo the business creation page when a tenant user
        has no business at all
    """
    if user is None or not user.is_authenticated:
        return Continue()

    config = settings.APP_SETTINGS.tenancy

    if resolver.has_current_business():
        business = resolver.get_current_business()
        if business is not None and membership.can_access_business(user, business):
            return Continue()

        # Access revoked or business gone: clear and pick another
        logger.info(
            f'[TENANT] User {user.pk} lost access to business '
            f'{resolver.session.get(config.session_key)!r}, reassigning'
        )
        resolver.set_current_business(None)

    business = _default_business(user)
    if business is not None:
        resolver.set_current_business(business)
        logger.debug(f'[TENANT] Assigned default business {business.pk} to user {user.pk}')
        return Continue()

    if membership.is_platform_user(user):
        return Continue()

    if request_path.rstrip('/') in (config.create_path.rstrip('/'), config.list_path.rstrip('/')):
        return Continue()

    resolver.session[config.intended_url_key] = request_url or request_path
    logger.info(f'[TENANT] User {user.pk} has no business, redirecting to {config.create_path}')
    return RedirectTo(config.create_path)


def _may_enter(user, business: Business) -> bool:
    """Member of the business or holder of the global super-admin role."""
    super_admin = settings.APP_SETTINGS.tenancy.super_admin_role
    return membership.is_member_of(user, business) or membership.has_global_role(user, super_admin)


def match_business_context(user, resolver: TenantResolver,
                           route_business: Optional[Business]) -> ContextResult:
    """
    Ensure the route's business agrees with the current business.

    With no current business the route's business is adopted if the user may
    access it. With a different current business the request is refused
    instead of switching.
    """
    if route_business is None:
        return Continue()

    landing = settings.APP_SETTINGS.tenancy.landing_path
    current = resolver.get_current_business()

    if current is None:
        if _may_enter(user, route_business):
            resolver.set_current_business(route_business)
            return Continue()
        logger.warning(
            f'[TENANT] User {getattr(user, "pk", None)} denied access to business {route_business.pk}'
        )
        return RedirectTo(landing, Notice('error', ACCESS_DENIED_MESSAGE))

    if current.pk != route_business.pk:
        logger.warning(
            f'[TENANT] Business mismatch for user {getattr(user, "pk", None)}: '
            f'session={current.pk} route={route_business.pk}'
        )
        # Never switch here; a business the user cannot see at all is reported as denied
        if not _may_enter(user, route_business):
            return RedirectTo(landing, Notice('error', ACCESS_DENIED_MESSAGE))
        return RedirectTo(landing, Notice('warning', MISMATCH_MESSAGE))

    return Continue()


def business_context_exempt(view_func):
    """Mark a view as exempt from the business context match."""
    view_func.business_context_exempt = True
    return view_func


class SetTenantContextMiddleware:
    """
    Attach a ``TenantResolver`` to the request and assign a business context.

    Must run after ``SessionMiddleware`` and ``AuthenticationMiddleware``.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        resolver = TenantResolver(request.session)
        request.tenant_resolver = resolver

        result = assign_tenant_context(
            getattr(request, 'user', None),
            resolver,
            request.path,
            request.build_absolute_uri(),
        )
        if isinstance(result, RedirectTo):
            return to_response(request, result)

        return self.get_response(request)


class EnsureBusinessContextMatchMiddleware:
    """
    Validate the route's business against the session's business.

    Runs in ``process_view`` so the resolved URL kwargs are available. Views
    wrapped with ``business_context_exempt`` are skipped.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_view(self, request, view_func, view_args, view_kwargs):
        if getattr(view_func, 'business_context_exempt', False):
            return None

        business_id = view_kwargs.get(settings.APP_SETTINGS.tenancy.route_kwarg)
        if business_id is None:
            return None

        resolver = getattr(request, 'tenant_resolver', None)
        if resolver is None:
            raise ImproperlyConfigured(
                'EnsureBusinessContextMatchMiddleware requires SetTenantContextMiddleware to run first.'
            )

        # Unknown ids fall through to the view, which answers 404
        route_business = Business.objects.filter(pk=business_id).first()
        result = match_business_context(getattr(request, 'user', None), resolver, route_business)
        if isinstance(result, RedirectTo):
            return to_response(request, result)
        return None
