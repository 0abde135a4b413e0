"""Notification feeds."""

from .sink import INotificationSink, NotificationSink

__all__ = ["INotificationSink", "NotificationSink"]
