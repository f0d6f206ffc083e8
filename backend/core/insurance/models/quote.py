from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from common.models import BaseAuditModel

_MIN_ZERO = MinValueValidator(Decimal("0.00"))

ADJUSTMENT_FIELDS = ("loadings", "discounts", "taxes", "fees")


class Quote(BaseAuditModel):
    """Priced, time-bounded offer of cover for a client."""

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        CONVERTED = "CONVERTED", "Converted"
        DECLINED = "DECLINED", "Declined"
        EXPIRED = "EXPIRED", "Expired"

    quote_number = models.CharField(max_length=50, unique=True, db_column="QUOTE_NUMBER")
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="quotes",
        db_column="CLIENT_ID",
    )
    product = models.ForeignKey(
        "insurance.Product",
        on_delete=models.PROTECT,
        related_name="quotes",
        db_column="PRODUCT_ID",
    )
    intermediary = models.ForeignKey(
        "insurance.Intermediary",
        on_delete=models.SET_NULL,
        related_name="quotes",
        null=True,
        blank=True,
        db_column="INTERMEDIARY_ID",
    )

    sum_insured = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[_MIN_ZERO], db_column="SUM_INSURED"
    )
    base_premium = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[_MIN_ZERO], db_column="BASE_PREMIUM"
    )
    total_premium = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[_MIN_ZERO],
        db_column="TOTAL_PREMIUM",
    )
    rate = models.DecimalField(
        max_digits=7,
        decimal_places=4,
        null=True,
        blank=True,
        validators=[_MIN_ZERO, MaxValueValidator(Decimal("100"))],
        db_column="RATE",
    )
    loadings = models.JSONField(default=list, blank=True, db_column="LOADINGS")
    discounts = models.JSONField(default=list, blank=True, db_column="DISCOUNTS")
    taxes = models.JSONField(default=list, blank=True, db_column="TAXES")
    fees = models.JSONField(default=list, blank=True, db_column="FEES")

    valid_from = models.DateTimeField(db_column="VALID_FROM")
    valid_to = models.DateTimeField(db_column="VALID_TO")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
        db_column="STATUS",
    )
    notes = models.TextField(blank=True, db_column="NOTES")
    client_notes = models.TextField(blank=True, db_column="CLIENT_NOTES")
    decline_reason = models.TextField(blank=True, db_column="DECLINE_REASON")

    converted_at = models.DateTimeField(null=True, blank=True, db_column="CONVERTED_AT")
    converted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        null=True,
        blank=True,
        db_column="CONVERTED_BY",
    )
    approved_at = models.DateTimeField(null=True, blank=True, db_column="APPROVED_AT")
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        null=True,
        blank=True,
        db_column="APPROVED_BY",
    )

    class Meta:
        db_table = "EASY_QUOTE"
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=("status", "valid_to"), name="idx_quote_status_valid_to"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.quote_number} ({self.status})"

    def clean(self):
        super().clean()
        errors: dict[str, str] = {}

        if self.valid_from and self.valid_to and self.valid_to <= self.valid_from:
            errors["valid_to"] = "valid_to must be after valid_from."

        for field_name in ADJUSTMENT_FIELDS:
            value = getattr(self, field_name)
            if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
                errors[field_name] = f"{field_name} must be a list of objects."

        if self.status == self.Status.DECLINED and not (self.decline_reason or "").strip():
            errors["decline_reason"] = "A decline reason is required."

        if errors:
            raise ValidationError(errors)

    def is_valid(self, now: datetime | None = None) -> bool:
        now = now or timezone.now()
        return (
            self.status == self.Status.PENDING
            and self.valid_from <= now <= self.valid_to
        )
