from __future__ import annotations

from datetime import date

from dateutil.relativedelta import relativedelta
from django.conf import settings

from commissions.engine import calculate_commission
from common.errors import ValidationError
from insurance.calculations import ZERO, quantize_money, to_decimal


def prepare_commission_fields(data: dict, *, today: date) -> dict:
    """Round the amount, fill due date and period, reject negatives.

    When ``amount`` is left out it is derived from the policy's effective
    premium and the commission rate.
    """

    fields = dict(data)

    if fields.get("amount") is None:
        policy = fields.get("policy")
        if policy is None or fields.get("rate") is None:
            raise ValidationError(
                {"amount": "Provide an amount, or a policy and rate to derive it from."}
            )
        fields["amount"] = calculate_commission(policy.effective_premium, fields["rate"])

    amount = to_decimal(fields["amount"])
    if amount < ZERO:
        raise ValidationError({"amount": "Commission amount cannot be negative."})
    fields["amount"] = quantize_money(amount)

    if not fields.get("due_date"):
        days = getattr(settings, "COMMISSION_DUE_DAYS", 30)
        fields["due_date"] = today + relativedelta(days=days)
    if not fields.get("period"):
        fields["period"] = f"{today:%Y-%m}"
    return fields
