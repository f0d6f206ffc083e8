from notifications.events import NotificationEvent
from notifications.service import notify

__all__ = ["NotificationEvent", "notify"]
