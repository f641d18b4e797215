"""
Chat-specific exceptions.

Exception Hierarchy:
    ChatError (base, extends BaseApplicationError)
    ├── ConversationNotFound - Conversation id does not exist (404)
    ├── MessageNotFound - Message id not in the conversation (404)
    ├── NotParticipant - Caller is not an active participant (403)
    ├── InvalidSearchQuery - Query too short after trimming (400)
    └── InvalidCursor - Search cursor could not be decoded (400)

Usage:
    from chat.exceptions import NotParticipant

    try:
        ReadStateService.mark_read(conversation_id, user.id)
    except NotParticipant as e:
        return Response(e.to_dict(), status=e.http_status)
"""

from __future__ import annotations

from core.exceptions import (
    BaseApplicationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class ChatError(BaseApplicationError):
    """Base exception for chat domain errors."""

    default_error_code = "CHAT_ERROR"


class ConversationNotFound(ChatError, NotFoundError):
    """Raised when a conversation id does not exist."""

    default_error_code = "CONVERSATION_NOT_FOUND"

    def __init__(self, conversation_id: int):
        super().__init__(
            message=f"Conversation {conversation_id} not found",
            details={"conversation_id": conversation_id},
        )
        self.conversation_id = conversation_id


class MessageNotFound(ChatError, NotFoundError):
    """Raised when a message id does not belong to the given conversation."""

    default_error_code = "MESSAGE_NOT_FOUND"

    def __init__(self, conversation_id: int, message_id: int):
        super().__init__(
            message=f"Message {message_id} not found in conversation {conversation_id}",
            details={"conversation_id": conversation_id, "message_id": message_id},
        )
        self.conversation_id = conversation_id
        self.message_id = message_id


class NotParticipant(ChatError, PermissionDeniedError):
    """
    Raised when the caller is not an active participant of a conversation.

    The message text contains "not a participant" so clients keyed on the
    wording keep working.
    """

    default_error_code = "NOT_PARTICIPANT"

    def __init__(self, conversation_id: int, user_id: int):
        super().__init__(
            message="You are not a participant in this conversation",
            details={"conversation_id": conversation_id},
        )
        self.conversation_id = conversation_id
        self.user_id = user_id


class InvalidSearchQuery(ChatError, ValidationError):
    """Raised when a search query is shorter than the minimum after trimming."""

    default_error_code = "QUERY_TOO_SHORT"

    def __init__(self, min_length: int):
        super().__init__(
            message=f"Search query must be at least {min_length} characters",
            details={"min_length": min_length},
        )
        self.min_length = min_length


class InvalidCursor(ChatError, ValidationError):
    """Raised when a pagination cursor is malformed."""

    default_error_code = "INVALID_CURSOR"

    def __init__(self):
        super().__init__(message="Invalid pagination cursor")
