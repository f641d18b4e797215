"""
Factory Boy factories for notification models.

Usage:
    from notifications.tests.factories import NotificationFactory

    # Create a notification for a user
    notification = NotificationFactory(recipient=user)

    # Create a read notification
    notification = NotificationFactory(recipient=user, read=True)
"""

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from notifications.models import Notification


class NotificationFactory(factory.django.DjangoModelFactory):
    """
    Factory for Notification model.

    Creates unread notifications without an actor by default.

    Examples:
        notification = NotificationFactory(recipient=user, actor=alice)
        notification = NotificationFactory(notification_type="system_alert")
    """

    class Meta:
        model = Notification

    recipient = factory.SubFactory(UserFactory)
    actor = None
    notification_type = "new_message"
    title = factory.Sequence(lambda n: f"Notification {n}")
    body = ""
    data = factory.LazyFunction(dict)
    is_read = False
    read_at = None

    class Params:
        read = factory.Trait(
            is_read=True,
            read_at=factory.LazyFunction(timezone.now),
        )
