from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from notifications.channels.base import NotificationChannel, NotificationDeliveryError

logger = logging.getLogger(__name__)


class EmailChannel(NotificationChannel):
    name = "email"

    def can_deliver(self, event) -> bool:
        return bool(event.email)

    def send(self, event, rendered):
        message = EmailMultiAlternatives(
            subject=rendered["subject"],
            body=rendered["email"],
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[event.email],
        )
        try:
            sent = message.send(fail_silently=False)
        except OSError as exc:
            raise NotificationDeliveryError(str(exc)) from exc
        if not sent:
            raise NotificationDeliveryError("Email backend reported zero messages sent.")
        logger.info("Sent %s email notification", event.kind)
        return {"type": self.name, "success": True}
