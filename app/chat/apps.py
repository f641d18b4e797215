"""
Chat application configuration.

This app provides:
- Direct (1:1) and group conversations
- Read markers and unread counts
- Message listing and search
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

    def ready(self):
        # Connect model signal receivers (last_message_at bookkeeping)
        from chat import signals  # noqa: F401
