"""
Notifications application configuration.

This app provides the in-app notification inbox: unread badge counts and
bulk mark-as-read.
"""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """Configuration for the notifications application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Notifications"
