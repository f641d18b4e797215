"""
Tests for chat API views.

Covers the request shell:
- Authentication (401 without a JWT)
- Parameter validation (400)
- Domain errors mapped to 403/404
- Unexpected failures mapped to a generic 500
- Response shapes
"""

import pytest
from rest_framework import status

from chat.models import ReadMarker
from chat.tests.factories import ConversationFactory, MessageFactory, ParticipantFactory


def read_url(conversation_id):
    return f"/api/v1/chat/conversations/{conversation_id}/read/"


def unread_url(conversation_id):
    return f"/api/v1/chat/conversations/{conversation_id}/unread/"


def messages_url(conversation_id):
    return f"/api/v1/chat/conversations/{conversation_id}/messages/"


SEARCH_URL = "/api/v1/chat/messages/search/"
LIST_URL = "/api/v1/chat/conversations/"


@pytest.fixture
def bob_messages(shared_conversation, bob):
    return [
        MessageFactory(conversation=shared_conversation, sender=bob, content=f"hello {i}")
        for i in range(3)
    ]


# =============================================================================
# Mark read
# =============================================================================


class TestMarkReadView:
    """POST /api/v1/chat/conversations/{id}/read/"""

    def test_requires_authentication(self, api_client, shared_conversation):
        response = api_client.post(read_url(shared_conversation.id))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_marks_latest_message(self, alice_client, shared_conversation, bob_messages):
        response = alice_client.post(read_url(shared_conversation.id), {}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["success"] is True
        assert response.data["conversation_id"] == shared_conversation.id
        assert response.data["last_read_message_id"] == bob_messages[-1].id
        assert response.data["last_read_at"] is not None

    def test_marks_up_to_message(self, alice_client, shared_conversation, bob_messages):
        response = alice_client.post(
            read_url(shared_conversation.id),
            {"up_to": bob_messages[0].id},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["last_read_message_id"] == bob_messages[0].id

    def test_never_moves_backward(self, alice_client, shared_conversation, bob_messages):
        alice_client.post(read_url(shared_conversation.id), {}, format="json")

        response = alice_client.post(
            read_url(shared_conversation.id),
            {"up_to": bob_messages[0].id},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["last_read_message_id"] == bob_messages[-1].id

    def test_non_participant_forbidden(self, carol_client, shared_conversation, bob_messages):
        response = carol_client.post(read_url(shared_conversation.id), {}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_PARTICIPANT"
        assert "not a participant" in response.data["error"]
        assert not ReadMarker.objects.exists()

    def test_missing_conversation(self, alice_client):
        response = alice_client.post(read_url(999999), {}, format="json")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "CONVERSATION_NOT_FOUND"

    def test_unknown_message(self, alice_client, shared_conversation, bob_messages):
        response = alice_client.post(
            read_url(shared_conversation.id), {"up_to": 999999}, format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "MESSAGE_NOT_FOUND"

    def test_malformed_body(self, alice_client, shared_conversation):
        response = alice_client.post(
            read_url(shared_conversation.id), {"up_to": "latest"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "up_to" in response.data

    def test_unexpected_error_is_generic_500(
        self, alice_client, shared_conversation, mocker
    ):
        mocker.patch(
            "chat.views.ReadStateService.mark_read",
            side_effect=RuntimeError("database exploded"),
        )

        response = alice_client.post(read_url(shared_conversation.id), {}, format="json")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {"error": "Failed to mark messages as read"}


# =============================================================================
# Search
# =============================================================================


class TestMessageSearchView:
    """GET /api/v1/chat/messages/search/"""

    def test_requires_authentication(self, api_client):
        response = api_client.get(SEARCH_URL, {"q": "hello"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_returns_matches(self, alice_client, shared_conversation, bob_messages, bob):
        response = alice_client.get(SEARCH_URL, {"q": "  hello "})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["query"] == "hello"
        assert response.data["conversation_id"] is None
        assert response.data["has_more"] is False
        assert response.data["next_cursor"] is None
        assert [m["id"] for m in response.data["messages"]] == [
            m.id for m in reversed(bob_messages)
        ]
        first = response.data["messages"][0]
        assert first["content"] == "hello 2"
        assert first["conversation_id"] == shared_conversation.id
        assert first["conversation_title"] == shared_conversation.title
        assert first["sender"] == {"id": bob.id, "display_name": "bob"}

    def test_short_query_is_400(self, alice_client, bob_messages):
        response = alice_client.get(SEARCH_URL, {"q": " h "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "QUERY_TOO_SHORT"

    def test_missing_query_is_400(self, alice_client):
        response = alice_client.get(SEARCH_URL)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_bad_conversation_id_is_400(self, alice_client):
        response = alice_client.get(SEARCH_URL, {"q": "hello", "conversation_id": "abc"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "conversation_id" in response.data

    def test_bad_cursor_is_400(self, alice_client, bob_messages):
        response = alice_client.get(SEARCH_URL, {"q": "hello", "cursor": "garbage"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "INVALID_CURSOR"

    def test_scoped_search_by_non_participant_is_403(
        self, carol_client, shared_conversation, bob_messages
    ):
        response = carol_client.get(
            SEARCH_URL, {"q": "hello", "conversation_id": shared_conversation.id}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_scoped_search_echoes_conversation_id(
        self, alice_client, shared_conversation, bob_messages
    ):
        response = alice_client.get(
            SEARCH_URL, {"q": "hello", "conversation_id": shared_conversation.id}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["conversation_id"] == shared_conversation.id
        assert len(response.data["messages"]) == 3

    def test_outsider_gets_empty_list(self, carol_client, bob_messages):
        response = carol_client.get(SEARCH_URL, {"q": "hello"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data["messages"] == []

    def test_pagination_round_trip(self, alice_client, bob_messages):
        first = alice_client.get(SEARCH_URL, {"q": "hello", "limit": 2})
        second = alice_client.get(
            SEARCH_URL, {"q": "hello", "limit": 2, "cursor": first.data["next_cursor"]}
        )

        assert first.data["has_more"] is True
        assert second.data["has_more"] is False
        assert [m["id"] for m in first.data["messages"] + second.data["messages"]] == [
            m.id for m in reversed(bob_messages)
        ]

    def test_unexpected_error_is_generic_500(self, alice_client, mocker):
        mocker.patch(
            "chat.views.MessageSearchService.search",
            side_effect=RuntimeError("boom"),
        )

        response = alice_client.get(SEARCH_URL, {"q": "hello"})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {"error": "Failed to search messages"}


# =============================================================================
# Conversation list / detail / unread
# =============================================================================


class TestConversationListView:
    """GET /api/v1/chat/conversations/"""

    def test_requires_authentication(self, api_client):
        assert api_client.get(LIST_URL).status_code == status.HTTP_401_UNAUTHORIZED

    def test_lists_only_active_conversations_with_unread_counts(
        self, alice_client, shared_conversation, bob_messages, alice, bob
    ):
        quiet = ConversationFactory(title="Quiet")
        ParticipantFactory(conversation=quiet, user=alice)
        hidden = ConversationFactory(title="Not mine")
        ParticipantFactory(conversation=hidden, user=bob)

        response = alice_client.get(LIST_URL)

        assert response.status_code == status.HTTP_200_OK
        rows = {row["id"]: row for row in response.data["results"]}
        assert set(rows) == {shared_conversation.id, quiet.id}
        assert rows[shared_conversation.id]["unread_count"] == 3
        assert rows[quiet.id]["unread_count"] == 0

    def test_most_recent_activity_first(self, alice_client, shared_conversation, alice, bob):
        newer = ConversationFactory()
        ParticipantFactory(conversation=newer, user=alice)
        MessageFactory(conversation=shared_conversation, sender=bob)
        MessageFactory(conversation=newer, sender=bob)

        response = alice_client.get(LIST_URL)

        assert [row["id"] for row in response.data["results"]] == [
            newer.id,
            shared_conversation.id,
        ]

    def test_unread_count_drops_after_read(
        self, alice_client, shared_conversation, bob_messages
    ):
        alice_client.post(read_url(shared_conversation.id), {}, format="json")

        response = alice_client.get(LIST_URL)

        assert response.data["results"][0]["unread_count"] == 0


class TestConversationDetailView:
    """GET /api/v1/chat/conversations/{id}/"""

    def test_participant_can_view(self, alice_client, shared_conversation):
        response = alice_client.get(f"{LIST_URL}{shared_conversation.id}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["title"] == shared_conversation.title

    def test_non_participant_forbidden(self, carol_client, shared_conversation):
        response = carol_client.get(f"{LIST_URL}{shared_conversation.id}/")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestUnreadView:
    """GET /api/v1/chat/conversations/{id}/unread/"""

    def test_reports_count_and_marker(
        self, alice_client, shared_conversation, bob_messages
    ):
        alice_client.post(
            read_url(shared_conversation.id),
            {"up_to": bob_messages[0].id},
            format="json",
        )

        response = alice_client.get(unread_url(shared_conversation.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            "conversation_id": shared_conversation.id,
            "unread_count": 2,
            "last_read_message_id": bob_messages[0].id,
        }

    def test_non_participant_forbidden(self, carol_client, shared_conversation):
        response = carol_client.get(unread_url(shared_conversation.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_missing_conversation(self, alice_client):
        response = alice_client.get(unread_url(999999))

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Message list
# =============================================================================


class TestMessageListView:
    """GET /api/v1/chat/conversations/{id}/messages/"""

    def test_oldest_first(self, alice_client, shared_conversation, bob_messages):
        response = alice_client.get(messages_url(shared_conversation.id))

        assert response.status_code == status.HTTP_200_OK
        assert [m["id"] for m in response.data["messages"]] == [m.id for m in bob_messages]
        assert response.data["has_more"] is False

    def test_after_id_and_limit(self, alice_client, shared_conversation, bob_messages):
        response = alice_client.get(
            messages_url(shared_conversation.id),
            {"after_id": bob_messages[0].id, "limit": 1},
        )

        assert [m["id"] for m in response.data["messages"]] == [bob_messages[1].id]
        assert response.data["has_more"] is True

    def test_system_message_has_null_sender(self, alice_client, shared_conversation):
        MessageFactory(conversation=shared_conversation, system=True)

        response = alice_client.get(messages_url(shared_conversation.id))

        assert response.data["messages"][0]["sender"] is None
        assert response.data["messages"][0]["message_type"] == "system"

    def test_limit_above_maximum_is_400(self, alice_client, shared_conversation):
        response = alice_client.get(messages_url(shared_conversation.id), {"limit": 1000})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_non_participant_forbidden(self, carol_client, shared_conversation, bob_messages):
        response = carol_client.get(messages_url(shared_conversation.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
