from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models

from common.models import BaseAuditModel


class Commission(BaseAuditModel):
    """Amount owed to an intermediary for business it placed."""

    class Type(models.TextChoices):
        NEW_BUSINESS = "NEW_BUSINESS", "New business"
        RENEWAL = "RENEWAL", "Renewal"
        BONUS = "BONUS", "Bonus"
        OVERRIDE = "OVERRIDE", "Override"
        ADJUSTMENT = "ADJUSTMENT", "Adjustment"
        CLAWBACK = "CLAWBACK", "Clawback"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        PROCESSING = "PROCESSING", "Processing"
        PAID = "PAID", "Paid"
        CANCELLED = "CANCELLED", "Cancelled"
        DISPUTED = "DISPUTED", "Disputed"

    intermediary = models.ForeignKey(
        "insurance.Intermediary",
        on_delete=models.PROTECT,
        related_name="commissions",
        db_column="INTERMEDIARY_ID",
    )
    product = models.ForeignKey(
        "insurance.Product",
        on_delete=models.PROTECT,
        related_name="commissions",
        db_column="PRODUCT_ID",
    )
    policy = models.ForeignKey(
        "insurance.Policy",
        on_delete=models.SET_NULL,
        related_name="commissions",
        null=True,
        blank=True,
        db_column="POLICY_ID",
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        db_column="AMOUNT",
    )
    rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
        db_column="RATE",
    )
    commission_type = models.CharField(
        max_length=20,
        choices=Type.choices,
        default=Type.NEW_BUSINESS,
        db_column="COMMISSION_TYPE",
    )
    period = models.CharField(
        max_length=7,
        validators=[RegexValidator(r"^\d{4}-(0[1-9]|1[0-2])$", "Period must be YYYY-MM.")],
        db_column="PERIOD",
    )
    due_date = models.DateField(db_column="DUE_DATE")
    paid_date = models.DateTimeField(null=True, blank=True, db_column="PAID_DATE")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
        db_column="STATUS",
    )
    payment_reference = models.CharField(
        max_length=100, blank=True, db_column="PAYMENT_REFERENCE"
    )
    notes = models.TextField(blank=True, db_column="NOTES")
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        null=True,
        blank=True,
        db_column="PROCESSED_BY",
    )

    class Meta:
        db_table = "EASY_COMMISSION"
        ordering = ("-due_date", "-id")
        indexes = [
            models.Index(fields=("intermediary", "status"), name="idx_commission_interm_status"),
            models.Index(fields=("period",), name="idx_commission_period"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.intermediary_id} {self.period} {self.amount} ({self.status})"
