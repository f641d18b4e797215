"""
Django signals for the chat app.

This module defines:
- conversation_read: sent after a read marker advances (on commit)
- A post_save handler keeping Conversation.last_message_at current

Related files:
    - services.py: ReadStateService.mark_read sends conversation_read
    - apps.py: Signal import in ready()

Usage:
    from django.dispatch import receiver
    from chat.signals import conversation_read

    @receiver(conversation_read)
    def push_read_receipt(sender, conversation_id, user_id,
                          last_read_message_id, read_at, **kwargs):
        ...
"""

import logging

from django.db.models import Q
from django.db.models.signals import post_save
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# Sent with: conversation_id, user_id, last_read_message_id, read_at
conversation_read = Signal()


@receiver(post_save, sender="chat.Message")
def update_conversation_last_message_at(sender, instance, created, **kwargs):
    """
    Bump the conversation's last_message_at when a message is created.

    The update is conditional so a late-committing older message never
    moves the timestamp backward.

    Args:
        sender: The Message model class
        instance: The Message instance that was saved
        created: Boolean indicating if this is a new record
        **kwargs: Additional signal arguments
    """
    if not created:
        return

    from chat.models import Conversation

    Conversation.objects.filter(pk=instance.conversation_id).filter(
        Q(last_message_at__isnull=True) | Q(last_message_at__lt=instance.created_at)
    ).update(last_message_at=instance.created_at)
    logger.debug(
        f"Conversation {instance.conversation_id} last_message_at "
        f"bumped by message {instance.pk}"
    )
