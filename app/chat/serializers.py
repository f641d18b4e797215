"""
Serializers for chat API.

This module provides serializers for the chat system:
- Request parameter serializers (mark read, search, message listing)
- Message serializers (list entries, search results)
- Conversation serializers (list with unread counts)
- Read marker serializer

Design Decisions:
    - Request parameters are validated by serializers before any service
      call, so malformed ids never reach the database
    - Unread counts are computed once per page by the view and passed in
      through the serializer context
"""

from __future__ import annotations

from rest_framework import serializers

from chat.constants import MESSAGE_CONFIG
from chat.models import Conversation, ConversationType, Message, ReadMarker
from chat.services import ReadStateService


# =============================================================================
# Request Parameter Serializers
# =============================================================================


class MarkReadSerializer(serializers.Serializer):
    """Body of POST /conversations/{id}/read/."""

    up_to = serializers.IntegerField(
        required=False,
        allow_null=True,
        min_value=1,
        help_text="Message ID to mark read up to (defaults to the newest message)",
    )


class MessageSearchParamsSerializer(serializers.Serializer):
    """Query parameters of GET /messages/search/."""

    q = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        default="",
        help_text=(
            f"Search text (at least {MESSAGE_CONFIG.SEARCH_MIN_QUERY_LENGTH} "
            "characters after trimming)"
        ),
    )
    conversation_id = serializers.IntegerField(
        required=False,
        min_value=1,
        help_text="Limit search to this conversation",
    )
    cursor = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text="Pagination cursor from a previous response",
    )
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        help_text=f"Results per page (clamped to {MESSAGE_CONFIG.SEARCH_MAX_RESULTS})",
    )


class MessageListParamsSerializer(serializers.Serializer):
    """Query parameters of GET /conversations/{id}/messages/."""

    after_id = serializers.IntegerField(
        required=False,
        min_value=0,
        help_text="Only return messages with a higher ID",
    )
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=MESSAGE_CONFIG.LIST_MAX_PAGE_SIZE,
        default=MESSAGE_CONFIG.LIST_DEFAULT_PAGE_SIZE,
        help_text=f"Messages per page (max {MESSAGE_CONFIG.LIST_MAX_PAGE_SIZE})",
    )


# =============================================================================
# Message Serializers
# =============================================================================


class SenderSerializer(serializers.Serializer):
    """Public identity of a message sender."""

    id = serializers.IntegerField(read_only=True)
    display_name = serializers.SerializerMethodField()

    def get_display_name(self, obj) -> str:
        return obj.get_full_name()


class MessageSerializer(serializers.ModelSerializer):
    """Message entry for conversation message lists."""

    sender = SenderSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "conversation_id",
            "sender",
            "message_type",
            "content",
            "created_at",
        ]
        read_only_fields = fields


class MessageSearchResultSerializer(MessageSerializer):
    """
    Message entry in search results.

    Adds the conversation title so results from different conversations
    can be told apart without another request.
    """

    conversation_title = serializers.CharField(
        source="conversation.title",
        read_only=True,
    )

    class Meta(MessageSerializer.Meta):
        fields = MessageSerializer.Meta.fields + ["conversation_title"]
        read_only_fields = fields


# =============================================================================
# Read State Serializers
# =============================================================================


class ReadMarkerSerializer(serializers.ModelSerializer):
    """Read marker as returned by the mark-read endpoint."""

    class Meta:
        model = ReadMarker
        fields = [
            "conversation_id",
            "last_read_message_id",
            "last_read_at",
        ]
        read_only_fields = fields


# =============================================================================
# Conversation Serializers
# =============================================================================


class ConversationListSerializer(serializers.ModelSerializer):
    """
    Serializer for conversation list view.

    Includes computed fields:
    - unread_count: Number of unread messages for current user
    - display_name: Title for groups, other user's name for direct
    """

    unread_count = serializers.SerializerMethodField(
        help_text="Number of unread messages"
    )
    display_name = serializers.SerializerMethodField(
        help_text="Display name for the conversation"
    )

    class Meta:
        model = Conversation
        fields = [
            "id",
            "conversation_type",
            "title",
            "display_name",
            "unread_count",
            "last_message_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_unread_count(self, obj: Conversation) -> int:
        """Unread count from the view's precomputed map, else a direct count."""
        unread_counts = self.context.get("unread_counts")
        if unread_counts is not None:
            return unread_counts.get(obj.pk, 0)

        request = self.context.get("request")
        if not request or not request.user.is_authenticated:
            return 0
        return ReadStateService.get_unread_count(obj.pk, request.user.pk)

    def get_display_name(self, obj: Conversation) -> str:
        """
        Generate display name for conversation.

        - Groups: title
        - Direct: other user's name
        """
        if obj.title:
            return obj.title

        if obj.conversation_type == ConversationType.DIRECT:
            request = self.context.get("request")
            if request and request.user.is_authenticated:
                other = (
                    obj.get_active_participants()
                    .exclude(user=request.user)
                    .select_related("user")
                    .first()
                )
                if other:
                    return other.user.get_full_name()

        return f"Conversation {obj.pk}"
