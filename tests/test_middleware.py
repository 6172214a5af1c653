"""Tests for the tenant context middleware."""
import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import ImproperlyConfigured

from apps.businesses.actions import invite_member
from apps.core.middleware.results import Continue, Notice, RedirectTo
from apps.core.middleware.tenant import (
    ACCESS_DENIED_MESSAGE,
    MISMATCH_MESSAGE,
    EnsureBusinessContextMatchMiddleware,
    assign_tenant_context,
    match_business_context,
)
from apps.core.models import Business
from apps.core.services.tenant_resolver import TenantResolver

pytestmark = pytest.mark.django_db


class TestAssignTenantContext:

    def test_anonymous_passes_through(self, resolver):
        assert assign_tenant_context(AnonymousUser(), resolver, '/dashboard') == Continue()
        assert not resolver.has_current_business()

    def test_valid_context_is_kept(self, member, business, make_business, resolver):
        own = make_business(member, 'Own')
        resolver.set_current_business(business)

        assert assign_tenant_context(member, resolver, '/dashboard') == Continue()
        assert resolver.get_current_business() == business
        assert own.pk != business.pk

    def test_owned_business_preferred_over_membership(self, member, business, make_business, resolver):
        own = make_business(member, 'Own')

        assign_tenant_context(member, resolver, '/dashboard')

        assert resolver.get_current_business() == own

    def test_first_membership_used_when_nothing_owned(self, member, business, resolver):
        assign_tenant_context(member, resolver, '/dashboard')

        assert resolver.get_current_business() == business

    def test_revoked_access_is_reassigned(self, member, business, make_user, make_business, resolver):
        foreign = make_business(make_user(), 'Foreign')
        resolver.set_current_business(foreign)

        assert assign_tenant_context(member, resolver, '/dashboard') == Continue()
        assert resolver.get_current_business() == business

    def test_deleted_business_is_reassigned(self, member, business, session):
        session['current_business_id'] = 424242
        resolver = TenantResolver(session)

        assign_tenant_context(member, resolver, '/dashboard')

        assert session['current_business_id'] == business.pk

    def test_revoked_access_without_alternative_clears_context(self, outsider, business, session):
        session['current_business_id'] = business.pk
        resolver = TenantResolver(session)

        result = assign_tenant_context(outsider, resolver, '/dashboard')

        assert result == RedirectTo('/businesses/create')
        assert 'current_business_id' not in session

    def test_tenant_user_without_business_is_sent_to_create(self, outsider, resolver, session):
        result = assign_tenant_context(
            outsider, resolver, '/reports', 'http://testserver/reports?page=2'
        )

        assert result == RedirectTo('/businesses/create')
        assert session['url.intended'] == 'http://testserver/reports?page=2'

    @pytest.mark.parametrize('path', ['/businesses/create', '/businesses', '/businesses/'])
    def test_create_and_list_paths_are_exempt(self, outsider, resolver, session, path):
        assert assign_tenant_context(outsider, resolver, path) == Continue()
        assert 'url.intended' not in session

    def test_platform_user_without_business_passes(self, super_admin, resolver):
        assert assign_tenant_context(super_admin, resolver, '/dashboard') == Continue()
        assert resolver.get_current_business() is None


class TestMatchBusinessContext:

    def test_no_route_business(self, member, resolver):
        assert match_business_context(member, resolver, None) == Continue()

    def test_matching_context(self, member, business, resolver):
        resolver.set_current_business(business)

        assert match_business_context(member, resolver, business) == Continue()

    def test_empty_context_adopts_route_for_member(self, member, business, resolver):
        assert match_business_context(member, resolver, business) == Continue()
        assert resolver.get_current_business() == business

    def test_empty_context_adopts_route_for_super_admin(self, super_admin, business, resolver):
        assert match_business_context(super_admin, resolver, business) == Continue()
        assert resolver.get_current_business() == business

    def test_empty_context_refuses_outsider(self, outsider, business, resolver):
        result = match_business_context(outsider, resolver, business)

        assert result == RedirectTo('/dashboard', Notice('error', ACCESS_DENIED_MESSAGE))
        assert not resolver.has_current_business()

    def test_mismatch_never_switches(self, member, business, make_user, make_business, resolver):
        other = make_business(make_user(), 'Other')
        invite_member(other, member)
        resolver.set_current_business(business)

        result = match_business_context(member, resolver, other)

        assert result == RedirectTo('/dashboard', Notice('warning', MISMATCH_MESSAGE))
        assert resolver.get_current_business() == business

    def test_mismatch_on_foreign_business_is_denied(self, member, business, make_user, make_business, resolver):
        foreign = make_business(make_user(), 'Foreign')
        resolver.set_current_business(business)

        result = match_business_context(member, resolver, foreign)

        assert result == RedirectTo('/dashboard', Notice('error', ACCESS_DENIED_MESSAGE))
        assert resolver.get_current_business() == business


class TestMatchMiddlewareWiring:

    def test_requires_assignment_middleware(self, rf, member, business):
        request = rf.get(f'/businesses/{business.pk}')
        request.user = member
        middleware = EnsureBusinessContextMatchMiddleware(lambda r: None)

        with pytest.raises(ImproperlyConfigured):
            middleware.process_view(request, lambda r: None, (), {'business_id': business.pk})

    def test_unknown_business_falls_through(self, rf, member):
        request = rf.get('/businesses/999')
        request.user = member
        request.tenant_resolver = TenantResolver()
        middleware = EnsureBusinessContextMatchMiddleware(lambda r: None)

        assert middleware.process_view(request, lambda r: None, (), {'business_id': 999}) is None
        assert not Business.objects.filter(pk=999).exists()

    def test_exempt_views_are_skipped(self, rf, outsider, business):
        request = rf.get(f'/businesses/{business.pk}/switch')
        request.user = outsider

        def view(request):
            return None
        view.business_context_exempt = True

        middleware = EnsureBusinessContextMatchMiddleware(lambda r: None)

        assert middleware.process_view(request, view, (), {'business_id': business.pk}) is None


class TestMiddlewareOverHttp:
    """Full request cycle through the middleware stack."""

    def test_tenant_without_business_redirected_to_create(self, login, outsider):
        client = login(outsider)

        response = client.get('/dashboard')

        assert response.status_code == 302
        assert response['Location'] == '/businesses/create'
        assert client.session['url.intended'] == 'http://testserver/dashboard'

    def test_create_page_reachable_without_business(self, login, outsider):
        response = login(outsider).get('/businesses/create')

        assert response.status_code == 200
        assert response.data['intendedUrl'] is None
        assert response.data['hasBusinesses'] is False

    def test_platform_user_reaches_dashboard_without_business(self, login, super_admin):
        response = login(super_admin).get('/dashboard')

        assert response.status_code == 200
        assert response.data['auth']['isPlatformUser'] is True
        assert response.data['currentBusiness'] is None

    def test_default_business_assigned_on_first_request(self, login, member, business):
        client = login(member)

        response = client.get('/dashboard')

        assert response.status_code == 200
        assert response.data['currentBusiness']['id'] == business.pk
        assert client.session['current_business_id'] == business.pk

    def test_foreign_business_url_is_refused(self, login, member, business, make_user, make_business):
        foreign = make_business(make_user(), 'Foreign')
        client = login(member)

        response = client.get(f'/businesses/{foreign.pk}')

        assert response.status_code == 302
        assert response['Location'] == '/dashboard'
        assert client.session['current_business_id'] == business.pk

        messages = client.get('/dashboard').data['messages']
        assert messages == [{'level': 'error', 'message': ACCESS_DENIED_MESSAGE}]

    def test_other_member_business_url_reports_mismatch(self, login, member, business, make_user, make_business):
        other = make_business(make_user(), 'Other')
        invite_member(other, member)
        client = login(member)
        client.get('/dashboard')

        response = client.get(f'/businesses/{other.pk}')

        assert response.status_code == 302
        assert response['Location'] == '/dashboard'
        assert client.session['current_business_id'] == business.pk

        messages = client.get('/dashboard').data['messages']
        assert messages == [{'level': 'warning', 'message': MISMATCH_MESSAGE}]

    def test_current_business_url_is_served(self, login, member, business):
        response = login(member).get(f'/businesses/{business.pk}')

        assert response.status_code == 200
        assert response.data['business']['id'] == business.pk

    def test_unknown_business_url_is_404(self, login, member, business):
        assert login(member).get('/businesses/999999').status_code == 404

    def test_trace_header(self, login, member, business):
        response = login(member).get('/dashboard', HTTP_X_TRACE_ID='abc123')

        assert response['X-Trace-Id'] == 'abc123'
