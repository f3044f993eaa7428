"""External API client implementations."""

from .notification_client import HttpNotificationClient, LocalNotificationClient

__all__ = [
    "HttpNotificationClient",
    "LocalNotificationClient",
]
