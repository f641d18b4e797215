"""
Notification service layer.

This module provides the business logic for in-app notifications.

Services:
    NotificationService: Notification creation and read status management

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Read state changes are bulk updates; nothing is loaded into memory

Usage:
    from notifications.services import NotificationService

    # Create a notification
    result = NotificationService.create_notification(
        recipient=user,
        notification_type="new_message",
        title="Alice sent you a message",
        actor=alice,
        data={"conversation_id": 12},
    )

    # Mark as read
    result = NotificationService.mark_as_read(notification, user)

    # Mark all as read
    result = NotificationService.mark_all_as_read(user)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.utils import timezone

from core.services import BaseService, ServiceResult
from notifications.models import Notification

if TYPE_CHECKING:
    from authentication.models import User


class NotificationService(BaseService):
    """
    Service for notification operations.

    Methods:
        create_notification: Create a new notification
        mark_as_read: Mark a single notification as read
        mark_all_as_read: Mark all user's unread notifications as read
        get_unread_count: Badge count for a user
    """

    @classmethod
    def create_notification(
        cls,
        recipient: User,
        notification_type: str,
        title: str,
        body: str = "",
        actor: User | None = None,
        data: dict | None = None,
    ) -> ServiceResult[Notification]:
        """
        Create a new notification for a user.

        Args:
            recipient: User receiving the notification
            notification_type: Type key (e.g., "new_message")
            title: Rendered title (required)
            body: Rendered body
            actor: User who triggered the notification (optional)
            data: JSON context (deep links, ids)

        Returns:
            ServiceResult with created Notification if successful

        Error codes:
            TYPE_REQUIRED: notification_type is blank
            TITLE_REQUIRED: title is blank
        """
        if not (notification_type or "").strip():
            return ServiceResult.failure(
                "Notification type is required",
                error_code="TYPE_REQUIRED",
            )

        if not (title or "").strip():
            return ServiceResult.failure(
                "Notification title is required",
                error_code="TITLE_REQUIRED",
                errors={"title": ["This field may not be blank."]},
            )

        notification = Notification.objects.create(
            recipient=recipient,
            actor=actor,
            notification_type=notification_type,
            title=title,
            body=body or "",
            data=data or {},
        )

        cls.get_logger().info(
            f"Created notification {notification.id} ({notification_type}) "
            f"for user {recipient.id}"
        )

        return ServiceResult.success(notification)

    @classmethod
    def mark_as_read(
        cls,
        notification: Notification,
        user: User,
    ) -> ServiceResult[Notification]:
        """
        Mark a single notification as read.

        Validates that the user owns the notification before marking.
        Operation is idempotent - marking an already-read notification succeeds.

        Error codes:
            NOT_OWNER: User doesn't own the notification
        """
        if notification.recipient_id != user.id:
            cls.get_logger().warning(
                f"User {user.id} attempted to mark notification {notification.id} "
                f"owned by user {notification.recipient_id}"
            )
            return ServiceResult.failure(
                "Cannot mark notification you don't own",
                error_code="NOT_OWNER",
            )

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=["is_read", "read_at", "updated_at"])
            cls.get_logger().debug(f"Marked notification {notification.id} as read")

        return ServiceResult.success(notification)

    @classmethod
    def mark_all_as_read(cls, user: User) -> ServiceResult[int]:
        """
        Mark all user's unread notifications as read.

        Performs a bulk update in a single database query. Calling it
        again marks nothing and returns 0.

        Args:
            user: The user whose notifications to mark as read

        Returns:
            ServiceResult with count of notifications marked as read
        """
        now = timezone.now()
        count = Notification.objects.filter(
            recipient=user,
            is_read=False,
        ).update(is_read=True, read_at=now, updated_at=now)

        cls.get_logger().info(
            f"Marked {count} notifications as read for user {user.id}"
        )

        return ServiceResult.success(count)

    @staticmethod
    def get_unread_count(user: User) -> int:
        """Count of the user's unread notifications."""
        return Notification.objects.filter(recipient=user, is_read=False).count()
