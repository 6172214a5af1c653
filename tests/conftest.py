"""Pytest configuration and fixtures."""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.businesses.actions import create_business, invite_member
from apps.businesses.data import BusinessData
from apps.core.services.roles import GLOBAL, RoleStore
from apps.core.services.tenant_resolver import TenantResolver


@pytest.fixture
def make_user(db):
    """Factory creating users with unique usernames."""
    User = get_user_model()
    counter = {'n': 0}

    def _make(username=None, **extra):
        counter['n'] += 1
        username = username or f'user{counter["n"]}'
        return User.objects.create_user(
            username=username,
            email=f'{username}@example.com',
            password='testpass123',
            **extra,
        )

    return _make


@pytest.fixture
def make_business(db):
    """Factory creating a business through the create action."""

    def _make(owner, name='Acme'):
        return create_business(owner, BusinessData(name=name))

    return _make


@pytest.fixture
def owner(make_user):
    return make_user('owner')


@pytest.fixture
def business(owner, make_business):
    return make_business(owner, 'Acme')


@pytest.fixture
def member(make_user, business):
    """A manager-level member of ``business``."""
    user = make_user('member')
    invite_member(business, user)
    return user


@pytest.fixture
def outsider(make_user):
    """Authenticated user with no business and no global role."""
    return make_user('outsider')


@pytest.fixture
def super_admin(make_user):
    user = make_user('superadmin')
    RoleStore().grant(user, 'super-admin', GLOBAL)
    return user


@pytest.fixture
def session():
    return {}


@pytest.fixture
def resolver(session):
    """Resolver backed by a plain dict standing in for the session."""
    return TenantResolver(session)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def login(api_client):
    """Log a user in through the session so the middleware sees them."""

    def _login(user):
        api_client.force_login(user)
        return api_client

    return _login
