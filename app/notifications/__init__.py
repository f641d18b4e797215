"""
Notifications app for in-app notifications.

This app provides:
- Notification model for storing user notifications
- NotificationService for creating notifications and managing read status
- REST API for listing notifications and marking them read

Usage:
    from notifications.services import NotificationService

    result = NotificationService.create_notification(
        recipient=user,
        notification_type="new_message",
        title=f"{sender.get_full_name()} sent you a message",
        actor=sender,
    )

    if result.success:
        notification = result.data
"""
