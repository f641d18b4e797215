"""
Django admin configuration for notification models.

Notifications are written by services; the admin is a read-only view
for debugging and support.
"""

from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Read-only view of notifications."""

    list_display = [
        "id",
        "notification_type",
        "recipient",
        "title",
        "is_read",
        "created_at",
    ]
    list_filter = ["is_read", "notification_type", "created_at"]
    search_fields = ["title", "recipient__email"]
    ordering = ["-created_at"]
    readonly_fields = [
        "notification_type",
        "recipient",
        "actor",
        "title",
        "body",
        "data",
        "read_at",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["recipient", "actor"]

    def has_add_permission(self, request):
        """Notifications are created by the system, not manually."""
        return False
