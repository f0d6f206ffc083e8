from __future__ import annotations

import logging

from django.conf import settings

from notifications.channels.base import NotificationChannel

logger = logging.getLogger(__name__)


class LoggingSMSChannel(NotificationChannel):
    """SMS gateway stand-in: messages are written to the log."""

    name = "sms"

    def can_deliver(self, event) -> bool:
        return bool(event.phone)

    def send(self, event, rendered):
        sender = getattr(settings, "NOTIFICATION_SMS_SENDER", "EASYBIMA")
        logger.info("SMS from %s to %s: %s", sender, event.phone, rendered["sms"])
        return {"type": self.name, "success": True}
