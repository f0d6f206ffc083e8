from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PAYMENT_DUE = "payment_due"
POLICY_EXPIRY = "policy_expiry"
DOCUMENT_REQUIRED = "document_required"
CANCELLATION_WARNING = "cancellation_warning"
CLAIM_PAYMENT_RECORDED = "claim_payment_recorded"


@dataclass(frozen=True)
class NotificationEvent:
    """Something a client should hear about.

    ``context`` carries the template variables (policy_number, amount,
    due_date, ...). Optional ``email_subject``/``email_template``/
    ``sms_template`` override the built-in wording for the event kind.
    """

    kind: str
    recipient_name: str = ""
    email: str = ""
    phone: str = ""
    context: dict[str, Any] = field(default_factory=dict)
    channels: tuple[str, ...] = ("email", "sms")
    email_subject: str = ""
    email_template: str = ""
    sms_template: str = ""
