from __future__ import annotations

from abc import ABC, abstractmethod


class NotificationChannelError(RuntimeError):
    """Base exception for notification channel failures."""

    retryable: bool = True


class NotificationDeliveryError(NotificationChannelError):
    """The provider refused or failed to deliver a message."""


class NotificationChannelNotSupported(NotificationChannelError):
    retryable = False


class NotificationChannel(ABC):
    """A delivery route for rendered notifications (email, SMS, ...)."""

    name: str = ""

    @abstractmethod
    def can_deliver(self, event) -> bool:
        """Whether the event carries an address this channel can use."""

    @abstractmethod
    def send(self, event, rendered: dict[str, str]) -> dict:
        """Deliver a rendered message. Raise ``NotificationChannelError`` on failure."""
