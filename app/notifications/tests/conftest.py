"""
Test configuration and fixtures for notification tests.

This module provides:
- Users receiving and triggering notifications
- Notification fixtures (read/unread, with/without actor)
- API client helpers for authenticated requests

Usage:
    def test_example(user, unread_notification, authenticated_client):
        response = authenticated_client.get('/api/v1/notifications/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from notifications.tests.factories import NotificationFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a user to receive notifications."""
    return UserFactory()


@pytest.fixture
def other_user(db):
    """Create another user for isolation tests."""
    return UserFactory()


@pytest.fixture
def actor_user(db):
    """Create a user to act as notification actor (trigger)."""
    return UserFactory(display_name="Jordan Actor")


# =============================================================================
# Notification Fixtures
# =============================================================================


@pytest.fixture
def unread_notification(user):
    """Unread notification for user."""
    return NotificationFactory(recipient=user)


@pytest.fixture
def read_notification(user):
    """Already-read notification for user."""
    return NotificationFactory(recipient=user, read=True)


@pytest.fixture
def multiple_unread_notifications(user):
    """Five unread notifications for user."""
    return NotificationFactory.create_batch(5, recipient=user)


@pytest.fixture
def mixed_notifications(user):
    """Three unread and two read notifications for user."""
    return NotificationFactory.create_batch(3, recipient=user) + (
        NotificationFactory.create_batch(2, recipient=user, read=True)
    )


@pytest.fixture
def other_user_notifications(other_user):
    """Three unread notifications belonging to other_user."""
    return NotificationFactory.create_batch(3, recipient=other_user)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, some_user):
            client = authenticated_client_factory(some_user)
            response = client.get('/api/v1/notifications/')
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def authenticated_client(authenticated_client_factory, user):
    """API client authenticated as user."""
    return authenticated_client_factory(user)


@pytest.fixture
def other_user_client(authenticated_client_factory, other_user):
    """API client authenticated as other_user."""
    return authenticated_client_factory(other_user)
