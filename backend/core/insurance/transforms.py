"""Pre-persistence transforms for insurance entities.

Each function takes the incoming field dict and returns a new dict ready for
the store. Services call them explicitly before ``create``/``update``.
"""

from __future__ import annotations

import random
from datetime import datetime

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.utils import timezone

from insurance.calculations import compute_total_premium, quantize_money
from insurance.models.quote import ADJUSTMENT_FIELDS

CLAIM_NUMBER_PREFIX = "CLM-"
QUOTE_NUMBER_PREFIX = "QTE-"


def _upper(value) -> str:
    return (value or "").strip().upper()


def generate_claim_number(now: datetime, rng: random.Random | None = None) -> str:
    """``CLM-`` + last six digits of the epoch millis + four random digits.

    Collisions are possible; the unique constraint on the column is the guard.
    """

    rng = rng or random.Random()
    millis = str(int(now.timestamp() * 1000))
    return f"{CLAIM_NUMBER_PREFIX}{millis[-6:]}{rng.randint(1000, 9999)}"


def generate_quote_number(now: datetime, rng: random.Random | None = None) -> str:
    rng = rng or random.Random()
    return f"{QUOTE_NUMBER_PREFIX}{now:%Y%m%d}-{rng.randint(10000, 99999)}"


def prepare_product_fields(data: dict) -> dict:
    fields = dict(data)
    if "code" in fields:
        fields["code"] = _upper(fields["code"])
    if "name" in fields and isinstance(fields["name"], str):
        fields["name"] = fields["name"].strip()
    return fields


def prepare_intermediary_fields(data: dict) -> dict:
    fields = dict(data)
    if "code" in fields:
        fields["code"] = _upper(fields["code"])
    if "email" in fields:
        fields["email"] = (fields["email"] or "").strip().lower()
    return fields


def prepare_quote_fields(data: dict, *, now: datetime, existing=None) -> dict:
    """Normalise a quote payload and recompute its total premium.

    ``existing`` is the stored quote on update, used to fill in the pricing
    inputs that a partial payload leaves out.
    """

    fields = dict(data)

    if "quote_number" in fields or existing is None:
        fields["quote_number"] = _upper(fields.get("quote_number")) or generate_quote_number(now)

    if existing is None and not fields.get("valid_from"):
        fields["valid_from"] = now
    if existing is None and not fields.get("valid_to"):
        validity_days = getattr(settings, "QUOTE_VALIDITY_DAYS", 30)
        fields["valid_to"] = fields["valid_from"] + relativedelta(days=validity_days)

    pricing_keys = ("base_premium",) + ADJUSTMENT_FIELDS
    if existing is None or any(key in fields for key in pricing_keys):
        def _current(key, default):
            if key in fields:
                return fields[key]
            return getattr(existing, key, default) if existing is not None else default

        for key in ADJUSTMENT_FIELDS:
            if key in fields and fields[key] is None:
                fields[key] = []
        fields["total_premium"] = compute_total_premium(
            _current("base_premium", 0),
            discounts=_current("discounts", []),
            loadings=_current("loadings", []),
            taxes=_current("taxes", []),
            fees=_current("fees", []),
        )
    return fields


def prepare_policy_fields(data: dict, *, existing=None) -> dict:
    fields = dict(data)
    if "policy_number" in fields:
        fields["policy_number"] = _upper(fields["policy_number"])

    # Not clamped: a negative result is rejected by model validation.
    if existing is None or "total_installments" in fields or "paid_installments" in fields:
        total = fields.get("total_installments", getattr(existing, "total_installments", 12))
        paid = fields.get("paid_installments", getattr(existing, "paid_installments", 0))
        fields["pending_installments"] = total - paid
    return fields


def prepare_claim_fields(data: dict, *, now: datetime) -> dict:
    fields = dict(data)
    fields["claim_number"] = _upper(fields.get("claim_number")) or generate_claim_number(now)
    if not fields.get("date_reported"):
        fields["date_reported"] = timezone.localdate(now)
    for key in ("estimated_amount", "approved_amount"):
        if fields.get(key) is not None:
            fields[key] = quantize_money(fields[key])
    return fields
