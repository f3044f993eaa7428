"""
Domain Interfaces (Ports)
"""

from .storage import KeyValueStore
from .clients import NotificationClient

__all__ = [
    "KeyValueStore",
    "NotificationClient",
]
