"""
Test configuration and fixtures for chat tests.

This module provides:
- Named users (alice, bob, carol) for scenario-style tests
- A conversation alice and bob share, and one carol is alone in
- API client helpers for authenticated requests

Usage:
    def test_example(shared_conversation, alice_client):
        response = alice_client.get(
            f"/api/v1/chat/conversations/{shared_conversation.id}/unread/"
        )
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.tests.factories import ConversationFactory, ParticipantFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    """Participant of shared_conversation."""
    return UserFactory(display_name="alice")


@pytest.fixture
def bob(db):
    """The other participant of shared_conversation."""
    return UserFactory(display_name="bob")


@pytest.fixture
def carol(db):
    """A user who shares no conversation with alice or bob."""
    return UserFactory(display_name="carol")


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def shared_conversation(db, alice, bob):
    """Group conversation with alice and bob as active participants."""
    conversation = ConversationFactory(title="C1", created_by=alice)
    ParticipantFactory(conversation=conversation, user=alice)
    ParticipantFactory(conversation=conversation, user=bob)
    return conversation


@pytest.fixture
def carol_conversation(db, carol):
    """Conversation only carol participates in."""
    conversation = ConversationFactory(title="Carol's notes", created_by=carol)
    ParticipantFactory(conversation=conversation, user=carol)
    return conversation


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
            response = client.get('/api/v1/chat/conversations/')
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


@pytest.fixture
def alice_client(authenticated_client_factory, alice):
    """API client authenticated as alice."""
    return authenticated_client_factory(alice)


@pytest.fixture
def bob_client(authenticated_client_factory, bob):
    """API client authenticated as bob."""
    return authenticated_client_factory(bob)


@pytest.fixture
def carol_client(authenticated_client_factory, carol):
    """API client authenticated as carol."""
    return authenticated_client_factory(carol)
