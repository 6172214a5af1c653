"""
System checks for the tenant middleware pipeline.

The business context must be assigned before it is matched against a route,
and both need the session and the authenticated user.
"""
from django.conf import settings
from django.core.checks import Error

ASSIGN = 'apps.core.middleware.tenant.SetTenantContextMiddleware'
MATCH = 'apps.core.middleware.tenant.EnsureBusinessContextMatchMiddleware'
AUTH = 'django.contrib.auth.middleware.AuthenticationMiddleware'


def check_tenant_middleware_order(app_configs, **kwargs):
    middleware = list(getattr(settings, 'MIDDLEWARE', []))
    errors = []

    if ASSIGN not in middleware:
        errors.append(Error(
            f'{ASSIGN} is missing from MIDDLEWARE.',
            id='tenancy.E001',
        ))
        return errors

    if AUTH not in middleware or middleware.index(AUTH) > middleware.index(ASSIGN):
        errors.append(Error(
            f'{ASSIGN} must come after {AUTH}.',
            id='tenancy.E002',
        ))

    if MATCH in middleware and middleware.index(MATCH) < middleware.index(ASSIGN):
        errors.append(Error(
            f'{MATCH} must come after {ASSIGN}.',
            id='tenancy.E003',
        ))

    return errors
