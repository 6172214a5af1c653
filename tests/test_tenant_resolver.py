"""Tests for the session-backed tenant resolver."""
import pytest

from apps.core.models import Business
from apps.core.services.tenant_resolver import TenantResolver, get_resolver

pytestmark = pytest.mark.django_db


class TestCurrentBusiness:
    """Reading and writing the current business."""

    def test_set_then_get_returns_same_business(self, resolver, business):
        resolver.set_current_business(business)

        assert resolver.get_current_business() == business
        assert resolver.has_current_business()

    def test_stores_plain_int_under_session_key(self, resolver, session, business):
        resolver.set_current_business(business)

        assert session['current_business_id'] == business.pk

    def test_clear_removes_context(self, resolver, session, business):
        resolver.set_current_business(business)
        resolver.set_current_business(None)

        assert resolver.get_current_business() is None
        assert not resolver.has_current_business()
        assert 'current_business_id' not in session

    def test_empty_session_has_no_business(self, resolver):
        assert resolver.get_current_business() is None
        assert not resolver.has_current_business()

    @pytest.mark.parametrize('stored', ['12', 1.5, None, True])
    def test_non_int_value_resolves_to_none(self, session, stored):
        session['current_business_id'] = stored

        assert TenantResolver(session).get_current_business() is None

    def test_deleted_business_resolves_to_none(self, session, business):
        TenantResolver(session).set_current_business(business)
        Business.objects.filter(pk=business.pk).delete()

        assert TenantResolver(session).get_current_business() is None

    def test_lookup_is_cached_per_resolver(self, session, business, django_assert_num_queries):
        session['current_business_id'] = business.pk
        resolver = TenantResolver(session)

        with django_assert_num_queries(1):
            resolver.get_current_business()
            resolver.get_current_business()


class TestScopeKey:
    """Permission scope resolution and overrides."""

    def test_scope_follows_session(self, resolver, business):
        assert resolver.resolve_scope_key() is None

        resolver.set_current_business(business)

        assert resolver.resolve_scope_key() == str(business.pk)

    def test_override_does_not_write_session(self, resolver, session, business, make_business, owner):
        other = make_business(owner, 'Other')
        resolver.set_current_business(business)

        resolver.set_scope_key(other)

        assert resolver.resolve_scope_key() == str(other.pk)
        assert session['current_business_id'] == business.pk

        resolver.clear_scope_key()
        assert resolver.resolve_scope_key() == str(business.pk)

    def test_override_to_global(self, resolver, business):
        resolver.set_current_business(business)

        with resolver.using_scope(None):
            assert resolver.resolve_scope_key() is None

        assert resolver.resolve_scope_key() == str(business.pk)

    def test_using_scope_restores_on_exception(self, resolver, business, make_business, owner):
        other = make_business(owner, 'Other')
        resolver.set_current_business(business)

        with pytest.raises(RuntimeError):
            with resolver.using_scope(other):
                assert resolver.resolve_scope_key() == str(other.pk)
                raise RuntimeError('boom')

        assert resolver.resolve_scope_key() == str(business.pk)

    def test_nested_overrides_unwind(self, resolver):
        with resolver.using_scope(1):
            with resolver.using_scope(2):
                assert resolver.resolve_scope_key() == '2'
            assert resolver.resolve_scope_key() == '1'
        assert resolver.resolve_scope_key() is None


class TestGetResolver:

    def test_reuses_request_resolver(self, rf):
        request = rf.get('/')
        request.session = {}

        first = get_resolver(request)

        assert get_resolver(request) is first
        assert request.tenant_resolver is first
