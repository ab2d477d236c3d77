"""
Shared pytest fixtures.
"""
import pytest
from django.core.cache import cache
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test to prevent pollution."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def operator(db):
    return get_user_model().objects.create_user(
        username='operator',
        email='operator@panchroma.ca',
        password='testpass123',
        is_staff=True
    )


@pytest.fixture
def regular_user(db):
    return get_user_model().objects.create_user(
        username='visitor',
        email='visitor@example.com',
        password='testpass123'
    )


@pytest.fixture
def operator_client(api_client, operator):
    api_client.force_authenticate(user=operator)
    return api_client


@pytest.fixture
def make_submission(db):
    """Factory for stored submissions."""
    from contact.models import ContactSubmission

    def _make(**kwargs):
        data = {
            'name': 'John Doe',
            'email': 'john@example.com',
            'subject': 'Website redesign',
            'message': 'We would like a new website for our bakery.',
            'ip_address': '49.36.1.1',
            'location': {
                'city': 'Hyderabad',
                'region': 'Telangana',
                'country': 'India',
                'lat': 17.38,
                'lng': 78.46,
            },
        }
        data.update(kwargs)
        return ContactSubmission.objects.create(**data)
    return _make


@pytest.fixture
def sample_submission(make_submission):
    return make_submission()
