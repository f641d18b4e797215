"""
Participant registry: who may read which conversation.

Every read-state and search operation asks this module first. A user
participates in a conversation iff they hold a Participant row with
left_at IS NULL; there are no roles at this layer.

Usage:
    from chat.registry import ParticipantRegistry

    ParticipantRegistry.require_participant(conversation_id, user.id)
    ids = ParticipantRegistry.conversation_ids_for_user(user.id)
"""

from __future__ import annotations

from chat.exceptions import ConversationNotFound, NotParticipant
from chat.models import Conversation, Participant
from core.services import BaseService


class ParticipantRegistry(BaseService):
    """
    Membership lookups for conversations.

    Read-only: the registry never creates or changes memberships.
    """

    @classmethod
    def is_participant(cls, conversation_id: int, user_id: int) -> bool:
        """
        Check whether a user is an active participant.

        Args:
            conversation_id: Conversation to check
            user_id: User to check

        Returns:
            True if the user has an active Participant row, False otherwise

        Raises:
            ConversationNotFound: The conversation does not exist
        """
        if not Conversation.objects.filter(pk=conversation_id).exists():
            raise ConversationNotFound(conversation_id)

        return Participant.objects.filter(
            conversation_id=conversation_id,
            user_id=user_id,
            left_at__isnull=True,
        ).exists()

    @classmethod
    def require_participant(cls, conversation_id: int, user_id: int) -> None:
        """
        Raise unless the user is an active participant.

        Raises:
            ConversationNotFound: The conversation does not exist
            NotParticipant: The user is not an active participant
        """
        if not cls.is_participant(conversation_id, user_id):
            cls.get_logger().warning(
                f"User {user_id} refused access to conversation {conversation_id}: "
                "not a participant"
            )
            raise NotParticipant(conversation_id, user_id)

    @staticmethod
    def conversation_ids_for_user(user_id: int) -> list[int]:
        """
        Get IDs of all conversations the user is an active participant in.

        This is the visibility scope for cross-conversation search.
        """
        return list(
            Participant.objects.filter(
                user_id=user_id,
                left_at__isnull=True,
            ).values_list("conversation_id", flat=True)
        )
