"""
Serializers for notification API.

Serializers:
    NotificationSerializer: Read-only serializer for notification details
    NotificationListParamsSerializer: Query parameters for the inbox
    UnreadCountSerializer: Response for unread count endpoint
    MarkAllReadResponseSerializer: Response for mark all read endpoint
"""

from __future__ import annotations

from rest_framework import serializers

from notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """
    Serializer for Notification model.

    actor_name is None for system notifications (no actor) or when the
    actor was deleted.
    """

    actor_name = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "notification_type",
            "title",
            "body",
            "data",
            "actor_name",
            "is_read",
            "read_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_actor_name(self, obj: Notification) -> str | None:
        if obj.actor is None:
            return None
        return obj.actor.get_full_name()


class NotificationListParamsSerializer(serializers.Serializer):
    """Inbox filters."""

    is_read = serializers.BooleanField(required=False, allow_null=True, default=None)
    type = serializers.CharField(required=False, allow_blank=True, max_length=100)


class UnreadCountSerializer(serializers.Serializer):
    """
    Response serializer for unread count endpoint.

    Fields:
        unread_count: Integer count of unread notifications
    """

    unread_count = serializers.IntegerField()


class MarkAllReadResponseSerializer(serializers.Serializer):
    """
    Response serializer for mark all read endpoint.

    Fields:
        success: Always true on a 200
        marked_count: Integer count of notifications marked as read
    """

    success = serializers.BooleanField()
    marked_count = serializers.IntegerField()
