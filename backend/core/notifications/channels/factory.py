from __future__ import annotations

from notifications.channels.base import NotificationChannel, NotificationChannelNotSupported
from notifications.channels.email import EmailChannel
from notifications.channels.sms import LoggingSMSChannel

_CHANNELS = {
    "email": EmailChannel,
    "sms": LoggingSMSChannel,
}


def get_channel(name: str) -> NotificationChannel:
    channel_cls = _CHANNELS.get((name or "").strip().lower())
    if channel_cls is None:
        raise NotificationChannelNotSupported(f"Unsupported notification channel {name!r}.")
    return channel_cls()
