from notifications.channels.base import (
    NotificationChannel,
    NotificationChannelError,
    NotificationDeliveryError,
)
from notifications.channels.factory import get_channel

__all__ = [
    "NotificationChannel",
    "NotificationChannelError",
    "NotificationDeliveryError",
    "get_channel",
]
