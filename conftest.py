"""
Back office — Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from django.contrib.auth.models import Permission
from rest_framework.test import APIClient

from tests.factories import SuperuserFactory, UserFactory


@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Active user without ledger permissions. Password TestPass2026!"""
    return UserFactory()


@pytest.fixture
def stock_mover(db):
    """Active user holding inventory.move_stock."""
    mover = UserFactory()
    mover.user_permissions.add(
        Permission.objects.get(content_type__app_label='inventory', codename='move_stock')
    )
    return mover


@pytest.fixture
def admin_user(db):
    """Superuser with default password TestPass2026!"""
    return SuperuserFactory()


@pytest.fixture
def authenticated_client(api_client, user):
    """API client authenticated as a regular user."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def mover_client(api_client, stock_mover):
    """API client authenticated as a user allowed to move stock."""
    api_client.force_authenticate(user=stock_mover)
    return api_client


@pytest.fixture
def admin_client(api_client, admin_user):
    """API client authenticated as a superuser."""
    api_client.force_authenticate(user=admin_user)
    return api_client
