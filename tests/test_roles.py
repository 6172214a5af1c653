"""Tests for the role store and membership queries."""
import pytest
from django.contrib.auth.models import AnonymousUser

from apps.core.models import Role
from apps.core.services import membership
from apps.core.services.roles import CURRENT, GLOBAL, RoleStore
from apps.core.services.tenant_resolver import TenantResolver

pytestmark = pytest.mark.django_db


class TestRoleStore:

    def test_grant_is_scoped_to_resolver_business(self, owner, business, make_business):
        other = make_business(owner, 'Other')
        resolver = TenantResolver()
        roles = RoleStore(resolver)

        with resolver.using_scope(business):
            roles.grant(owner, 'admin')

        with resolver.using_scope(business):
            assert roles.has(owner, 'admin')
        with resolver.using_scope(other):
            assert not roles.has(owner, 'admin')
        assert not roles.has(owner, 'admin', GLOBAL)

    def test_same_name_global_and_scoped_are_distinct(self, owner, business):
        roles = RoleStore()
        global_role = roles.ensure_role('admin', GLOBAL)
        scoped_role = roles.ensure_role('admin', business)

        assert global_role.pk != scoped_role.pk
        assert global_role.is_global
        assert not scoped_role.is_global

    def test_ensure_role_is_idempotent(self, business):
        roles = RoleStore()
        roles.ensure_role('manager', business)
        roles.ensure_role('manager', business)

        assert Role.objects.filter(name='manager', business=business).count() == 1

    def test_revoke(self, owner, business):
        roles = RoleStore()
        roles.grant(owner, 'admin', business)

        assert roles.revoke(owner, 'admin', business) == 1
        assert not roles.has(owner, 'admin', business)

    def test_revoke_scoped_keeps_named_roles(self, owner, business):
        roles = RoleStore()
        roles.grant(owner, 'admin', business)

        roles.revoke_scoped(owner, business, keep=['owner'])

        assert roles.roles_in(owner, business) == {'owner'}

    def test_current_scope_without_business_is_global(self, make_user):
        user = make_user()
        roles = RoleStore()
        roles.grant(user, 'manager', CURRENT)

        assert roles.list_global(user) == {'manager'}

    def test_anonymous_has_nothing(self):
        assert not RoleStore().has(AnonymousUser(), 'super-admin', GLOBAL)


class TestMembership:

    def test_owner_is_member_with_owner_role(self, owner, business):
        assert membership.is_owner_of(owner, business)
        assert membership.is_member_of(owner, business)
        assert membership.has_tenant_role(owner, 'owner', business)

    def test_tenant_role_does_not_leak_across_businesses(self, owner, business, make_user, make_business):
        stranger = make_user()
        other = make_business(stranger, 'Other')

        assert not membership.has_tenant_role(owner, 'owner', other)

    def test_tenant_role_check_restores_ambient_scope(self, owner, business, make_business):
        other = make_business(owner, 'Other')
        resolver = TenantResolver()
        resolver.set_current_business(business)

        membership.has_tenant_role(owner, 'owner', other, resolver)

        assert resolver.resolve_scope_key() == str(business.pk)

    def test_tenant_role_check_restores_scope_when_store_raises(self, owner, business, monkeypatch):
        resolver = TenantResolver()
        resolver.set_current_business(business)

        def explode(*args, **kwargs):
            raise RuntimeError('store unavailable')

        monkeypatch.setattr(RoleStore, 'has', explode)

        with pytest.raises(RuntimeError):
            membership.has_tenant_role(owner, 'owner', 999, resolver)

        assert resolver.resolve_scope_key() == str(business.pk)

    def test_platform_user_needs_global_role(self, super_admin, owner, business):
        assert membership.is_platform_user(super_admin)
        assert not membership.is_platform_user(owner)
        assert membership.global_roles(super_admin) == {'super-admin'}
        assert membership.global_roles(owner) == set()

    def test_can_access_business(self, owner, member, outsider, super_admin, business):
        assert membership.can_access_business(owner, business)
        assert membership.can_access_business(member, business)
        assert membership.can_access_business(super_admin, business)
        assert not membership.can_access_business(outsider, business)

    def test_accessible_businesses_without_duplicates(self, owner, business, make_business):
        other = make_business(owner, 'Other')

        assert list(membership.accessible_businesses(owner)) == [business, other]

    def test_anonymous_user(self, business):
        anonymous = AnonymousUser()

        assert not membership.is_member_of(anonymous, business)
        assert not membership.is_platform_user(anonymous)
        assert not membership.accessible_businesses(anonymous).exists()
