"""
Test configuration for the rewards server.
"""
import pytest
from django.core.cache import cache
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_cache():
    """Leaderboard snapshots must not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user_factory():
    """Factory for creating test users."""
    from tests.factories import UserFactory
    return UserFactory


@pytest.fixture
def promotion_factory():
    from tests.factories import PromotionFactory
    return PromotionFactory


@pytest.fixture
def test_user(db):
    """Create a test user with an empty points summary."""
    from tests.factories import UserFactory
    return UserFactory()


@pytest.fixture
def staff_user(db):
    from tests.factories import UserFactory
    return UserFactory(is_staff=True)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(api_client, test_user):
    """API client authenticated as ``test_user``."""
    api_client.force_authenticate(user=test_user)
    return api_client
