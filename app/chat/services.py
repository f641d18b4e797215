"""
Chat system service layer.

This module provides the business logic for conversation read state and
message search. Membership checks live in chat.registry.

Services:
    ReadStateService: Read markers and unread counts
    MessageStore: Ordered, read-only access to a conversation's messages
    MessageSearchService: Substring search over the caller's conversations

Design Principles:
    - Services are stateless (use class methods)
    - The caller's identity is always passed explicitly (user_id)
    - Access and lookup failures raise chat.exceptions subclasses so the
      request shell can map them to distinct statuses
    - Input validation happens before any database access
    - Message bodies are never logged

Usage:
    from chat.services import MessageSearchService, ReadStateService

    marker = ReadStateService.mark_read(conversation_id, user.id)
    unread = ReadStateService.get_unread_count(conversation_id, user.id)

    page = MessageSearchService.search(user.id, "hello", cursor=cursor)
    for message in page.results:
        ...
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.db import transaction
from django.db.models import (
    BigIntegerField,
    Count,
    IntegerField,
    OuterRef,
    Q,
    Subquery,
    Value,
)
from django.db.models.functions import Coalesce
from django.utils import timezone

from chat.constants import MESSAGE_CONFIG
from chat.exceptions import InvalidCursor, InvalidSearchQuery, MessageNotFound
from chat.models import Message, Participant, ReadMarker
from chat.registry import ParticipantRegistry
from chat.signals import conversation_read
from core.services import BaseService

if TYPE_CHECKING:
    from django.db.models import QuerySet


# =============================================================================
# MessageStore
# =============================================================================


class MessageStore(BaseService):
    """
    Read-only accessor for a conversation's message sequence.

    Does not check access: callers go through ParticipantRegistry first.
    """

    @staticmethod
    def list_messages(
        conversation_id: int,
        after_id: int | None = None,
    ) -> QuerySet[Message]:
        """
        Messages of a conversation in sequence order (oldest first).

        Args:
            conversation_id: Conversation to read
            after_id: Only return messages with a higher id

        Returns:
            Lazy QuerySet ordered by id ascending
        """
        queryset = (
            Message.objects.filter(conversation_id=conversation_id)
            .select_related("sender")
            .order_by("id")
        )
        if after_id is not None:
            queryset = queryset.filter(id__gt=after_id)
        return queryset

    @staticmethod
    def latest_message(conversation_id: int) -> Message | None:
        """Newest message (highest id) in the conversation, or None if empty."""
        return (
            Message.objects.filter(conversation_id=conversation_id)
            .order_by("-id")
            .first()
        )

    @staticmethod
    def get_message(conversation_id: int, message_id: int) -> Message:
        """
        Fetch a message that must belong to the given conversation.

        Raises:
            MessageNotFound: No such message in this conversation
        """
        try:
            return Message.objects.get(pk=message_id, conversation_id=conversation_id)
        except Message.DoesNotExist:
            raise MessageNotFound(conversation_id, message_id) from None


# =============================================================================
# ReadStateService
# =============================================================================


class ReadStateService(BaseService):
    """
    Service for per-user read markers.

    Methods:
        mark_read: Move the caller's marker forward (never backward)
        get_marker: Current marker, if any
        get_unread_count: Unread messages in one conversation
        get_unread_counts: Unread messages across all the user's conversations
    """

    @classmethod
    def mark_read(
        cls,
        conversation_id: int,
        user_id: int,
        up_to: int | None = None,
    ) -> ReadMarker:
        """
        Mark a conversation as read up to a message.

        The marker is upserted and then advanced with a single conditional
        UPDATE, so concurrent calls settle on the highest target regardless
        of arrival order. Targets at or before the current marker are no-ops.

        Args:
            conversation_id: Conversation to mark
            user_id: Reader (must be an active participant)
            up_to: Message id to read up to; defaults to the newest message

        Returns:
            The caller's ReadMarker as stored after the call

        Raises:
            ConversationNotFound: The conversation does not exist
            NotParticipant: The user is not an active participant
            MessageNotFound: up_to is not a message of this conversation
        """
        ParticipantRegistry.require_participant(conversation_id, user_id)

        if up_to is not None:
            target = MessageStore.get_message(conversation_id, up_to)
        else:
            target = MessageStore.latest_message(conversation_id)

        now = timezone.now()
        read_at = target.created_at if target is not None else now

        with cls.atomic():
            marker, created = ReadMarker.objects.get_or_create(
                conversation_id=conversation_id,
                user_id=user_id,
                defaults={"last_read_message": target, "last_read_at": read_at},
            )

            if created:
                advanced = target is not None
            elif target is not None:
                advanced = (
                    ReadMarker.objects.filter(pk=marker.pk)
                    .filter(
                        Q(last_read_message__isnull=True)
                        | Q(last_read_message_id__lt=target.pk)
                    )
                    .update(
                        last_read_message=target,
                        last_read_at=read_at,
                        updated_at=now,
                    )
                    > 0
                )
                marker.refresh_from_db()
            else:
                advanced = False

            if advanced:
                payload = {
                    "conversation_id": conversation_id,
                    "user_id": user_id,
                    "last_read_message_id": target.pk,
                    "read_at": read_at,
                }
                transaction.on_commit(
                    lambda: conversation_read.send(sender=ReadMarker, **payload)
                )

        if advanced:
            cls.get_logger().info(
                f"User {user_id} read conversation {conversation_id} "
                f"up to message {marker.last_read_message_id}"
            )
        else:
            cls.get_logger().debug(
                f"User {user_id} read marker for conversation {conversation_id} "
                f"unchanged at {marker.last_read_message_id}"
            )

        return marker

    @staticmethod
    def get_marker(conversation_id: int, user_id: int) -> ReadMarker | None:
        """Current read marker for the pair, or None if never marked."""
        return ReadMarker.objects.filter(
            conversation_id=conversation_id,
            user_id=user_id,
        ).first()

    @classmethod
    def get_unread_count(cls, conversation_id: int, user_id: int) -> int:
        """
        Get count of unread messages for a user in a conversation.

        Unread messages are those after the user's read marker. Without a
        marker every message is unread. Messages from the user themselves
        are excluded from the count.

        Returns:
            Number of unread messages (0 if user is not a participant)
        """
        is_active = Participant.objects.filter(
            conversation_id=conversation_id,
            user_id=user_id,
            left_at__isnull=True,
        ).exists()
        if not is_active:
            return 0

        last_read_id = (
            ReadMarker.objects.filter(conversation_id=conversation_id, user_id=user_id)
            .values_list("last_read_message_id", flat=True)
            .first()
        )

        queryset = Message.objects.filter(conversation_id=conversation_id).exclude(
            sender_id=user_id
        )
        if last_read_id is not None:
            queryset = queryset.filter(id__gt=last_read_id)

        return queryset.count()

    @classmethod
    def get_unread_counts(cls, user_id: int) -> dict[int, int]:
        """
        Unread counts for every conversation the user is active in.

        Runs a single query: each active membership is annotated with the
        user's marker and the number of later messages from other senders,
        so the statement size does not grow with the membership count.

        Returns:
            Mapping of conversation id to unread count (0 included)
        """
        last_read = ReadMarker.objects.filter(
            conversation_id=OuterRef("conversation_id"),
            user_id=user_id,
        ).values("last_read_message_id")[:1]

        # Message ids start at 1, so 0 means "nothing read yet"
        unread = (
            Message.objects.filter(
                conversation_id=OuterRef("conversation_id"),
                id__gt=OuterRef("last_read_id"),
            )
            .exclude(sender_id=user_id)
            .order_by()
            .values("conversation_id")
            .annotate(unread=Count("id"))
            .values("unread")
        )

        rows = (
            Participant.objects.filter(user_id=user_id, left_at__isnull=True)
            .annotate(
                last_read_id=Coalesce(
                    Subquery(last_read), Value(0), output_field=BigIntegerField()
                )
            )
            .annotate(
                unread=Coalesce(
                    Subquery(unread), Value(0), output_field=IntegerField()
                )
            )
            .values_list("conversation_id", "unread")
        )
        return dict(rows)


# =============================================================================
# MessageSearchService
# =============================================================================


@dataclass
class SearchCursor:
    """
    Cursor for keyset pagination in search results.

    Uses message_id for simple, reliable pagination since IDs are unique
    and results are always ordered by id descending.
    """

    last_message_id: int

    def encode(self) -> str:
        """Encode cursor as URL-safe base64 JSON string."""
        json_str = json.dumps({"last_id": self.last_message_id})
        return base64.urlsafe_b64encode(json_str.encode()).decode()

    @classmethod
    def decode(cls, encoded: str) -> SearchCursor:
        """
        Decode cursor from URL-safe base64 JSON string.

        Raises:
            InvalidCursor: The string is not a cursor this service produced
        """
        try:
            json_str = base64.urlsafe_b64decode(encoded.encode()).decode()
            data = json.loads(json_str)
            last_id = int(data["last_id"])
        except (binascii.Error, ValueError, KeyError, TypeError):
            raise InvalidCursor() from None

        if last_id < 1:
            raise InvalidCursor()
        return cls(last_message_id=last_id)


@dataclass
class SearchPage:
    """
    One page of search results.

    Attributes:
        results: Matching messages, most recent first
        next_cursor: Cursor for the following page (None on the last page)
        has_more: Whether another page exists
    """

    results: list[Message] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


class MessageSearchService(BaseService):
    """
    Service for searching messages across the caller's conversations.

    Handles:
    - Query validation (before any database access)
    - Conversation-scoped search with access checks
    - Case-insensitive substring matching
    - Cursor-based pagination, most recent first
    """

    @classmethod
    def search(
        cls,
        user_id: int,
        query: str,
        conversation_id: int | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> SearchPage:
        """
        Search messages visible to the user.

        Args:
            user_id: User performing the search
            query: Search text; surrounding whitespace is ignored
            conversation_id: Optional - limit search to one conversation
            cursor: Optional - pagination cursor from a previous page
            limit: Page size (defaults to SEARCH_DEFAULT_PAGE_SIZE,
                clamped to SEARCH_MAX_RESULTS)

        Returns:
            SearchPage; an empty page when nothing matches

        Raises:
            InvalidSearchQuery: Trimmed query is too short
            InvalidCursor: Cursor is malformed
            ConversationNotFound: conversation_id does not exist
            NotParticipant: User is not in conversation_id
        """
        query = (query or "").strip()
        if len(query) < MESSAGE_CONFIG.SEARCH_MIN_QUERY_LENGTH:
            raise InvalidSearchQuery(MESSAGE_CONFIG.SEARCH_MIN_QUERY_LENGTH)

        before_id = SearchCursor.decode(cursor).last_message_id if cursor else None

        if limit is None:
            limit = MESSAGE_CONFIG.SEARCH_DEFAULT_PAGE_SIZE
        page_size = max(1, min(limit, MESSAGE_CONFIG.SEARCH_MAX_RESULTS))

        # Handle conversation filter FIRST (before getting accessible IDs)
        if conversation_id is not None:
            ParticipantRegistry.require_participant(conversation_id, user_id)
            accessible_ids = [conversation_id]
        else:
            accessible_ids = ParticipantRegistry.conversation_ids_for_user(user_id)
            if not accessible_ids:
                return SearchPage()

        queryset = Message.objects.filter(
            conversation_id__in=accessible_ids,
            content__icontains=query,
        ).select_related("sender", "conversation")

        if before_id is not None:
            queryset = queryset.filter(id__lt=before_id)

        # Fetch one extra to check if there are more results
        results = list(queryset.order_by("-id")[: page_size + 1])
        has_more = len(results) > page_size
        results = results[:page_size]

        next_cursor = None
        if has_more and results:
            next_cursor = SearchCursor(last_message_id=results[-1].pk).encode()

        cls.get_logger().debug(
            f"User {user_id} search returned {len(results)} messages "
            f"(scope={len(accessible_ids)} conversations, has_more={has_more})"
        )

        return SearchPage(results=results, next_cursor=next_cursor, has_more=has_more)
