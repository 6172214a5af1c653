"""
Role store.

Grants, revokes and checks (role, scope) pairs for users. A scope is either
global (roles with no business) or a single business. Calls that take
``scope=CURRENT`` resolve it through the bound ``TenantResolver``, so the
same store answers for whichever business the resolver is scoped to.
"""
import logging
from typing import Iterable, Optional, Set

from apps.core.models import Business, Role, RoleAssignment
from apps.core.services.tenant_resolver import TenantResolver

logger = logging.getLogger(__name__)


class _Scope:
    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return self.name


CURRENT = _Scope('CURRENT')
GLOBAL = _Scope('GLOBAL')


class RoleStore:
    """
    Capability interface over the ``roles`` and ``role_assignments`` tables.

    Args:
        resolver: Scope resolver. A detached resolver (global scope) is used
            when omitted.
    """

    def __init__(self, resolver: Optional[TenantResolver] = None):
        self.resolver = resolver if resolver is not None else TenantResolver()

    def _business_id(self, scope) -> Optional[int]:
        if scope is CURRENT:
            key = self.resolver.resolve_scope_key()
            return int(key) if key is not None else None
        if scope is GLOBAL or scope is None:
            return None
        if isinstance(scope, Business):
            return scope.pk
        return int(scope)

    def ensure_role(self, name: str, scope=CURRENT) -> Role:
        """Find or create the role ``name`` in ``scope``."""
        business_id = self._business_id(scope)
        role, created = Role.objects.get_or_create(name=name, business_id=business_id)
        if created:
            logger.info(f'[ROLES] Created role {role}')
        return role

    def grant(self, user, name: str, scope=CURRENT) -> RoleAssignment:
        """
        Grant role ``name`` in ``scope`` to ``user``, creating the role if needed.

        Args:
            user: User receiving the role
            name: Role name
            scope: ``CURRENT``, ``GLOBAL``, a Business or a business id

        Returns:
            RoleAssignment: the existing or new assignment
        """
        role = self.ensure_role(name, scope)
        assignment, created = RoleAssignment.objects.get_or_create(user=user, role=role)
        if created:
            logger.info(f'[ROLES] Granted {role} to user {user.pk}')
        return assignment

    def revoke(self, user, name: str, scope=CURRENT) -> int:
        """
        Remove role ``name`` in ``scope`` from ``user``.

        Returns:
            int: number of assignments deleted (0 if the user did not hold it)
        """
        business_id = self._business_id(scope)
        deleted, _ = self._assignments(user, business_id).filter(role__name=name).delete()
        if deleted:
            logger.info(f'[ROLES] Revoked {name}@{business_id or "global"} from user {user.pk}')
        return deleted

    def revoke_scoped(self, user, scope=CURRENT, keep: Iterable[str] = ()) -> int:
        """
        Revoke every grant ``user`` holds in ``scope`` except the roles named in ``keep``.

        Args:
            user: User losing the roles
            scope: ``CURRENT``, ``GLOBAL``, a Business or a business id
            keep: Role names to leave in place

        Returns:
            int: number of assignments deleted
        """
        business_id = self._business_id(scope)
        deleted, _ = self._assignments(user, business_id).exclude(role__name__in=list(keep)).delete()
        return deleted

    def has(self, user, name: str, scope=CURRENT) -> bool:
        """
        Check whether ``user`` holds role ``name`` in ``scope``.

        Args:
            user: User to check; anonymous users hold nothing
            name: Role name
            scope: ``CURRENT``, ``GLOBAL``, a Business or a business id

        Returns:
            bool: True if an assignment exists in exactly that scope
        """
        if not getattr(user, 'is_authenticated', False):
            return False
        business_id = self._business_id(scope)
        return self._assignments(user, business_id).filter(role__name=name).exists()

    def roles_in(self, user, scope=CURRENT) -> Set[str]:
        """Names of the roles ``user`` holds in ``scope``."""
        if not getattr(user, 'is_authenticated', False):
            return set()
        business_id = self._business_id(scope)
        return set(self._assignments(user, business_id).values_list('role__name', flat=True))

    def list_global(self, user) -> Set[str]:
        return self.roles_in(user, GLOBAL)

    def _assignments(self, user, business_id: Optional[int]):
        queryset = RoleAssignment.objects.filter(user=user)
        if business_id is None:
            return queryset.filter(role__business__isnull=True)
        return queryset.filter(role__business_id=business_id)
