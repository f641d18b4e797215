"""
Chat system models.

This module defines the data models for the chat system supporting:
- Direct (1:1) and group conversations
- Membership history through Participant rows
- Per-user read markers

Models:
    Conversation: Container for messages between participants
    Participant: User participation in a conversation
    Message: Individual message within a conversation
    ReadMarker: Furthest message a user has read in a conversation

Design Decisions:
    - Conversations, participants and messages are written by other services
      (or the admin); this app reads them and only writes ReadMarker
    - Participant records are immutable history; leaving sets left_at and
      a rejoin creates a new record
    - Message.id is the conversation's ordering sequence
    - A read marker only ever moves forward (see ReadStateService.mark_read)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from chat.constants import MESSAGE_CONFIG
from core.models import BaseModel


class ConversationType(models.TextChoices):
    """
    Type of conversation.

    DIRECT: Exactly two participants
    GROUP: Two or more participants, optional title
    """

    DIRECT = "direct", "Direct Message"
    GROUP = "group", "Group"


class MessageType(models.TextChoices):
    """
    Type of message content.

    TEXT: User-authored text message
    SYSTEM: Auto-generated event message (e.g., "User joined")
    """

    TEXT = "text", "Text"
    SYSTEM = "system", "System"


class Conversation(BaseModel):
    """
    A conversation between two or more users.

    Fields:
        conversation_type: Type of conversation (direct or group)
        title: Group title (empty string for direct conversations)
        created_by: User who created the conversation (nullable)
        last_message_at: Timestamp of most recent message (for sorting)

    Relationships:
        participants: All Participant records for this conversation
        messages: All Message records for this conversation
        read_markers: One ReadMarker per user who has read it
    """

    conversation_type = models.CharField(
        max_length=10,
        choices=ConversationType.choices,
        default=ConversationType.GROUP,
        db_index=True,
        help_text="Type of conversation (direct or group)",
    )

    title = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Title for group conversations (empty for direct)",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_conversations",
        help_text="User who created this conversation (null for system-created)",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of most recent message (for sorting conversation lists)",
    )

    class Meta:
        db_table = "chat_conversation"
        ordering = ["-last_message_at", "-created_at"]

    def __str__(self) -> str:
        """Return human-readable representation."""
        if self.conversation_type == ConversationType.DIRECT:
            return f"Direct({self.pk})"
        if self.title:
            return f"Group: {self.title}"
        return f"Group({self.pk})"

    @property
    def is_direct(self) -> bool:
        """Check if this is a direct (1:1) conversation."""
        return self.conversation_type == ConversationType.DIRECT

    def get_active_participants(self):
        """
        Get queryset of active participants.

        Returns:
            QuerySet of Participant objects where left_at is NULL
        """
        return self.participants.filter(left_at__isnull=True)


class Participant(BaseModel):
    """
    Tracks user participation in conversations.

    Membership is binary: a user participates iff they have a record with
    left_at IS NULL. Leaving sets left_at; rejoining creates a new record,
    so earlier memberships are kept with their left_at timestamps.

    Constraints:
        - UniqueConstraint(conversation, user) WHERE left_at IS NULL:
          Only one active participation per user per conversation
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="participants",
        help_text="Conversation this participation belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="conversation_participations",
        help_text="User participating in the conversation",
    )

    joined_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user joined this conversation",
    )

    left_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When the user left (null if still active)",
    )

    class Meta:
        db_table = "chat_participant"
        ordering = ["joined_at"]
        indexes = [
            # Active participants in a conversation
            models.Index(
                fields=["conversation", "left_at"],
                name="chat_part_conv_active_idx",
            ),
            # User's active conversations
            models.Index(
                fields=["user", "left_at", "-joined_at"],
                name="chat_part_user_active_idx",
            ),
        ]
        constraints = [
            # Only one active participation per user per conversation
            models.UniqueConstraint(
                fields=["conversation", "user"],
                condition=Q(left_at__isnull=True),
                name="unique_active_participation",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        status = "active" if self.is_active else "left"
        return f"Participant: {self.user_id} in {self.conversation_id} [{status}]"

    @property
    def is_active(self) -> bool:
        """Check if this participation is currently active."""
        return self.left_at is None


class Message(BaseModel):
    """
    A message within a conversation.

    Messages are immutable once created. The auto-increment id doubles as
    the ordering sequence: a higher id is always a later message.

    Fields:
        conversation: Conversation this message belongs to
        sender: User who sent the message (NULL for system messages)
        message_type: Type of message (text or system)
        content: Message text
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_messages",
        help_text="User who sent this message (null for system messages)",
    )

    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        db_index=True,
        help_text="Type of message (text or system)",
    )

    content = models.TextField(
        help_text="Message content",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["id"]
        indexes = [
            # Messages in a conversation by sequence (listing, unread counts)
            models.Index(
                fields=["conversation", "id"],
                name="chat_msg_conv_seq_idx",
            ),
            # User's messages
            models.Index(
                fields=["sender", "-created_at"],
                name="chat_msg_sender_idx",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        sender_str = f"User {self.sender_id}" if self.sender_id else "System"
        return f"{sender_str}: {self.preview}"

    @property
    def preview(self) -> str:
        """Content truncated for list displays."""
        limit = MESSAGE_CONFIG.PREVIEW_LENGTH
        if len(self.content) > limit:
            return self.content[:limit] + "..."
        return self.content

    @property
    def is_system_message(self) -> bool:
        """Check if this is a system-generated message."""
        return self.message_type == MessageType.SYSTEM


class ReadMarker(BaseModel):
    """
    How far a user has read in a conversation.

    Exactly one row per (conversation, user). The row is only written by
    ReadStateService.mark_read, which never moves it backward.

    Fields:
        conversation: Conversation the marker belongs to
        user: Reader
        last_read_message: Furthest message read (null if the conversation
            was empty when first marked)
        last_read_at: created_at of last_read_message, or the time of the
            read for an empty conversation
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="read_markers",
        help_text="Conversation this marker belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="read_markers",
        help_text="User whose read position this is",
    )

    last_read_message = models.ForeignKey(
        Message,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Furthest message the user has read",
    )

    last_read_at = models.DateTimeField(
        help_text="When the last read message was posted (or read time if empty)",
    )

    class Meta:
        db_table = "chat_read_marker"
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                name="unique_read_marker_per_user",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return (
            f"ReadMarker: {self.user_id} in {self.conversation_id} "
            f"@ {self.last_read_message_id}"
        )
