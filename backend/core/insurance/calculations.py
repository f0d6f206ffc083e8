"""Premium and balance arithmetic. Pure functions, no database access."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Mapping

from dateutil.relativedelta import relativedelta

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

FREQUENCY_MONTHS = {
    "MONTHLY": 1,
    "QUARTERLY": 3,
    "SEMI_ANNUAL": 6,
    "ANNUAL": 12,
}


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Invalid monetary value: {value!r}") from None


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _sum_amounts(entries: Iterable[Mapping] | None) -> Decimal:
    return sum((to_decimal(entry.get("amount")) for entry in entries or ()), ZERO)


def compute_total_premium(
    base_premium,
    discounts: Iterable[Mapping] | None = None,
    loadings: Iterable[Mapping] | None = None,
    taxes: Iterable[Mapping] | None = None,
    fees: Iterable[Mapping] | None = None,
) -> Decimal:
    """Apply adjustments in a fixed order: discounts, loadings, taxes, fees.

    Rate-based taxes are charged on the running total at the moment the tax is
    applied, so two 10% taxes compound.
    """

    total = to_decimal(base_premium)
    total = max(ZERO, total - _sum_amounts(discounts))
    total += _sum_amounts(loadings)

    for tax in taxes or ():
        if tax.get("amount") not in (None, ""):
            total += to_decimal(tax["amount"])
        else:
            total += total * to_decimal(tax.get("rate")) / HUNDRED

    total += _sum_amounts(fees)
    return quantize_money(total)


def outstanding_balance(effective_premium, total_paid) -> Decimal:
    return quantize_money(max(ZERO, to_decimal(effective_premium) - to_decimal(total_paid)))


def payment_progress(effective_premium, total_paid) -> Decimal:
    premium = to_decimal(effective_premium)
    if premium <= ZERO:
        return Decimal("100.00")
    progress = to_decimal(total_paid) / premium * HUNDRED
    return quantize_money(min(HUNDRED, progress))


def installment_amount(effective_premium, down_payment, total_installments: int) -> Decimal:
    if total_installments < 1:
        raise ValueError("total_installments must be at least 1.")
    remaining = max(ZERO, to_decimal(effective_premium) - to_decimal(down_payment))
    return quantize_money(remaining / total_installments)


def installment_schedule(
    *,
    effective_premium,
    down_payment,
    total_installments: int,
    first_due_date: date,
    frequency: str,
) -> list[dict]:
    """Split the premium left after the down payment into dated installments.

    Rounding residue lands on the last installment so the schedule sums exactly.
    """

    months = FREQUENCY_MONTHS.get(frequency)
    if months is None:
        raise ValueError(f"Unknown installment frequency '{frequency}'.")

    remaining = max(ZERO, to_decimal(effective_premium) - to_decimal(down_payment))
    value = installment_amount(effective_premium, down_payment, total_installments)
    diff = remaining - value * total_installments

    schedule = []
    for number in range(1, total_installments + 1):
        amount = value + diff if number == total_installments else value
        schedule.append(
            {
                "number": number,
                "due_date": first_due_date + relativedelta(months=months * (number - 1)),
                "amount": amount,
            }
        )
    return schedule
