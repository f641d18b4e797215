"""
Chat app: conversation read state and message search.

This app handles:
- Conversation membership lookups (who may read what)
- Per-user read markers and unread counts
- Ordered message listing
- Case-insensitive message search scoped to the caller's conversations

Related apps:
    - authentication: User model for participants and senders
    - notifications: Inbox whose "mark all read" lives beside the chat routes

Usage:
    from chat.services import MessageSearchService, ReadStateService

    marker = ReadStateService.mark_read(conversation_id, user.id)
    page = MessageSearchService.search(user.id, "hello")
"""
