from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from common.models import BaseAuditModel

_MIN_ZERO = MinValueValidator(Decimal("0.00"))


class Claim(BaseAuditModel):
    """Loss notification raised against a policy."""

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        SUBMITTED = "SUBMITTED", "Submitted"
        UNDER_REVIEW = "UNDER_REVIEW", "Under review"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"
        PAID = "PAID", "Paid"
        CLOSED = "CLOSED", "Closed"

    claim_number = models.CharField(max_length=30, unique=True, db_column="CLAIM_NUMBER")
    policy = models.ForeignKey(
        "insurance.Policy",
        on_delete=models.PROTECT,
        related_name="claims",
        db_column="POLICY_ID",
    )
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="claims",
        db_column="CLIENT_ID",
    )
    date_of_loss = models.DateField(db_column="DATE_OF_LOSS")
    date_reported = models.DateField(default=timezone.localdate, db_column="DATE_REPORTED")
    description = models.TextField(db_column="DESCRIPTION")
    location = models.CharField(max_length=255, blank=True, db_column="LOCATION")

    estimated_amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[_MIN_ZERO], db_column="ESTIMATED_AMOUNT"
    )
    approved_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[_MIN_ZERO],
        db_column="APPROVED_AMOUNT",
    )
    paid_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[_MIN_ZERO],
        db_column="PAID_AMOUNT",
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True,
        db_column="STATUS",
    )
    rejection_reason = models.TextField(blank=True, db_column="REJECTION_REASON")
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="assigned_claims",
        null=True,
        blank=True,
        db_column="ASSIGNED_TO",
    )
    date_assigned = models.DateTimeField(null=True, blank=True, db_column="DATE_ASSIGNED")
    date_completed = models.DateTimeField(null=True, blank=True, db_column="DATE_COMPLETED")
    police_report_number = models.CharField(
        max_length=50, blank=True, db_column="POLICE_REPORT_NUMBER"
    )
    is_police_report = models.BooleanField(default=False, db_column="IS_POLICE_REPORT")
    metadata = models.JSONField(default=dict, blank=True, db_column="METADATA")

    class Meta:
        db_table = "EASY_CLAIM"
        ordering = ("-date_reported", "-id")
        indexes = [
            models.Index(fields=("status", "date_reported"), name="idx_claim_status_reported"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.claim_number} ({self.status})"

    def clean(self):
        super().clean()
        errors: dict[str, str] = {}

        if self.date_of_loss and self.date_reported and self.date_of_loss > self.date_reported:
            errors["date_of_loss"] = "date_of_loss cannot be after date_reported."

        if self.policy_id and self.client_id and self.policy.client_id != self.client_id:
            errors["client"] = "Claim client must match the policy holder."

        if self.status == self.Status.REJECTED and not (self.rejection_reason or "").strip():
            errors["rejection_reason"] = "A rejection reason is required."

        if errors:
            raise ValidationError(errors)

    @property
    def outstanding_amount(self) -> Decimal:
        if self.approved_amount is None:
            return Decimal("0.00")
        return max(Decimal("0.00"), self.approved_amount - self.paid_amount)
