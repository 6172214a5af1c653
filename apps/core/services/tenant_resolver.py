"""
Tenant resolver.

Reads and writes the current business (tenant) for a session and doubles as
the scope resolver of the role store: role grants and checks made through a
``RoleStore`` bound to a resolver are scoped to the business returned by
``resolve_scope_key()``.

One resolver is created per request by ``SetTenantContextMiddleware`` and
attached to ``request.tenant_resolver``. Outside of a request (management
commands, tests) a detached resolver backed by a plain dict can be used.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, MutableMapping, Optional, Union

from django.conf import settings

from apps.core.models import Business

logger = logging.getLogger(__name__)

_UNSET = object()

ScopeValue = Union[Business, int, str, None]


def _scope_key_for(value: ScopeValue) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Business):
        return str(value.pk)
    return str(value)


class TenantResolver:
    """
    Session-backed current business with a request-local cache.

    Args:
        session: Django session (or any mutable mapping). A fresh dict is
            used when omitted.
    """

    def __init__(self, session: Optional[MutableMapping] = None):
        self.session = session if session is not None else {}
        self._business: Optional[Business] = None
        self._scope_override = _UNSET

    @property
    def session_key(self) -> str:
        return settings.APP_SETTINGS.tenancy.session_key

    @property
    def current_business_id(self) -> Optional[int]:
        """The stored business id, or None if absent or not an int."""
        business_id = self.session.get(self.session_key)
        if isinstance(business_id, bool) or not isinstance(business_id, int):
            return None
        return business_id

    def get_current_business(self) -> Optional[Business]:
        business_id = self.current_business_id
        if business_id is None:
            return None

        if self._business is not None and self._business.pk == business_id:
            return self._business

        business = Business.objects.filter(pk=business_id).first()
        self._business = business
        return business

    def set_current_business(self, business: Optional[Business]) -> None:
        if business is None:
            self.session.pop(self.session_key, None)
            self._business = None
            return

        self.session[self.session_key] = business.pk
        self._business = business
        logger.debug(f'[TENANT] Current business set to {business.pk}')

    def has_current_business(self) -> bool:
        return self.session_key in self.session

    # ------------------------------------------------------------------
    # Permission scope
    # ------------------------------------------------------------------

    def resolve_scope_key(self) -> Optional[str]:
        """
        Scope token for role evaluation.

        Returns the active override if one is set, otherwise the stored
        business id as a string. None means global scope.
        """
        if self._scope_override is not _UNSET:
            return self._scope_override
        business_id = self.current_business_id
        return str(business_id) if business_id is not None else None

    def set_scope_key(self, value: ScopeValue) -> None:
        """Override the scope until ``clear_scope_key`` is called. Never writes the session."""
        self._scope_override = _scope_key_for(value)

    def clear_scope_key(self) -> None:
        self._scope_override = _UNSET

    @contextmanager
    def using_scope(self, value: ScopeValue) -> Iterator["TenantResolver"]:
        """
        Temporarily scope role evaluation to ``value``.

        The previous scope is restored on exit, including when the body raises.

        Example:
            >>> with resolver.using_scope(business):
            ...     roles.has(user, 'admin')
        """
        previous = self._scope_override
        self._scope_override = _scope_key_for(value)
        try:
            yield self
        finally:
            self._scope_override = previous


def get_resolver(request) -> TenantResolver:
    """Return the request's resolver, creating one on first use."""
    resolver = getattr(request, 'tenant_resolver', None)
    if resolver is None:
        resolver = TenantResolver(request.session)
        request.tenant_resolver = resolver
    return resolver
