from __future__ import annotations

from notifications import events

_DEFAULT_TEMPLATES = {
    events.PAYMENT_DUE: {
        "subject": "Payment Reminder - Policy {policy_number}",
        "email": (
            "Dear {recipient_name},\n\n"
            "This is a friendly reminder that your payment of {amount} for policy "
            "{policy_number} is due on {due_date}.\n\n"
            "Please make your payment to avoid any interruption in coverage.\n\n"
            "Thank you."
        ),
        "sms": (
            "Payment reminder: {amount} due for policy {policy_number} on {due_date}. "
            "Please pay to maintain coverage."
        ),
    },
    events.POLICY_EXPIRY: {
        "subject": "Policy Expiry Reminder - {policy_number}",
        "email": (
            "Dear {recipient_name},\n\n"
            "Your policy {policy_number} is due to expire on {policy_end_date}.\n\n"
            "Please contact us to renew your policy and maintain continuous coverage.\n\n"
            "Thank you."
        ),
        "sms": "Policy {policy_number} expires on {policy_end_date}. Contact us to renew.",
    },
    events.CANCELLATION_WARNING: {
        "subject": "Cancellation Warning - Policy {policy_number}",
        "email": (
            "Dear {recipient_name},\n\n"
            "Policy {policy_number} has {overdue_installments} overdue installment(s) and "
            "may be cancelled. Please settle the outstanding balance of {outstanding_balance}.\n\n"
            "Thank you."
        ),
        "sms": (
            "Policy {policy_number} risks cancellation: {overdue_installments} overdue "
            "installment(s). Balance {outstanding_balance}."
        ),
    },
    events.DOCUMENT_REQUIRED: {
        "subject": "Documents Required - Policy {policy_number}",
        "email": (
            "Dear {recipient_name},\n\n"
            "We still need supporting documents for policy {policy_number}. "
            "Please share them with your agent.\n\nThank you."
        ),
        "sms": "Documents required for policy {policy_number}. Please contact your agent.",
    },
    events.CLAIM_PAYMENT_RECORDED: {
        "subject": "Claim {claim_number} - Payment Recorded",
        "email": (
            "Dear {recipient_name},\n\n"
            "A payment of {amount} has been recorded against claim {claim_number}. "
            "Total paid so far: {paid_amount}.\n\nThank you."
        ),
        "sms": "Claim {claim_number}: payment of {amount} recorded. Total paid {paid_amount}.",
    },
}


class _SafeFormatDict(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def render(template: str, context: dict) -> str:
    return template.format_map(_SafeFormatDict(context))


def render_event(event) -> dict[str, str]:
    defaults = _DEFAULT_TEMPLATES.get(event.kind, {})
    context = {"recipient_name": event.recipient_name, **event.context}
    return {
        "subject": render(event.email_subject or defaults.get("subject", ""), context),
        "email": render(event.email_template or defaults.get("email", ""), context),
        "sms": render(event.sms_template or defaults.get("sms", ""), context),
    }
