from __future__ import annotations

import logging

from django.conf import settings

from notifications.channels import NotificationChannelError, get_channel
from notifications.events import NotificationEvent
from notifications.templates import render_event

logger = logging.getLogger(__name__)


def notify(event: NotificationEvent) -> list[dict]:
    """Fire-and-forget delivery of ``event`` on every enabled channel.

    Never raises: each channel's outcome is logged and returned so callers can
    inspect it if they want to, but lifecycle operations ignore the result.
    """

    enabled = set(getattr(settings, "NOTIFICATION_CHANNELS", ["email", "sms"]))
    results: list[dict] = []
    try:
        rendered = render_event(event)
    except (KeyError, ValueError, IndexError) as exc:
        logger.warning("Could not render %s notification: %s", event.kind, exc)
        return [{"type": "render", "success": False, "error": str(exc)}]

    for name in event.channels:
        if name not in enabled:
            continue
        try:
            channel = get_channel(name)
            if not channel.can_deliver(event):
                continue
            results.append(channel.send(event, rendered))
        except NotificationChannelError as exc:
            logger.warning("%s notification via %s failed: %s", event.kind, name, exc)
            results.append({"type": name, "success": False, "error": str(exc)})
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected %s notification failure via %s", event.kind, name)
            results.append({"type": name, "success": False, "error": str(exc)})
    return results
