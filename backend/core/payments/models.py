from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from common.models import BaseAuditModel


class Payment(BaseAuditModel):
    """Money received against a policy or paid out on a claim."""

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        COMPLETED = "COMPLETED", "Completed"
        FAILED = "FAILED", "Failed"
        CANCELLED = "CANCELLED", "Cancelled"
        REFUNDED = "REFUNDED", "Refunded"

    class Method(models.TextChoices):
        MPESA = "MPESA", "M-Pesa"
        BANK_TRANSFER = "BANK_TRANSFER", "Bank transfer"
        CASH = "CASH", "Cash"
        CHEQUE = "CHEQUE", "Cheque"
        CARD = "CARD", "Card"

    class Type(models.TextChoices):
        DOWN_PAYMENT = "DOWN_PAYMENT", "Down payment"
        INSTALLMENT = "INSTALLMENT", "Installment"
        FULL_PAYMENT = "FULL_PAYMENT", "Full payment"
        ADJUSTMENT = "ADJUSTMENT", "Adjustment"
        CLAIM_SETTLEMENT = "CLAIM_SETTLEMENT", "Claim settlement"

    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="payments",
        db_column="CLIENT_ID",
    )
    policy = models.ForeignKey(
        "insurance.Policy",
        on_delete=models.PROTECT,
        related_name="payments",
        null=True,
        blank=True,
        db_column="POLICY_ID",
    )
    claim = models.ForeignKey(
        "insurance.Claim",
        on_delete=models.PROTECT,
        related_name="payments",
        null=True,
        blank=True,
        db_column="CLAIM_ID",
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        db_column="AMOUNT",
    )
    payment_method = models.CharField(
        max_length=20, choices=Method.choices, db_column="PAYMENT_METHOD"
    )
    payment_type = models.CharField(
        max_length=20,
        choices=Type.choices,
        default=Type.INSTALLMENT,
        db_column="PAYMENT_TYPE",
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
        db_column="STATUS",
    )
    transaction_id = models.CharField(
        max_length=100, unique=True, null=True, blank=True, db_column="TRANSACTION_ID"
    )
    mpesa_code = models.CharField(max_length=30, blank=True, db_column="MPESA_CODE")
    payment_date = models.DateTimeField(null=True, blank=True, db_column="PAYMENT_DATE")
    due_date = models.DateField(null=True, blank=True, db_column="DUE_DATE")
    installment_number = models.PositiveIntegerField(
        null=True, blank=True, db_column="INSTALLMENT_NUMBER"
    )
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        null=True,
        blank=True,
        db_column="VALIDATED_BY",
    )
    validated_at = models.DateTimeField(null=True, blank=True, db_column="VALIDATED_AT")
    notes = models.TextField(blank=True, db_column="NOTES")

    class Meta:
        db_table = "EASY_PAYMENT"
        ordering = ("-payment_date", "-id")
        indexes = [
            models.Index(fields=("client", "status"), name="idx_payment_client_status"),
            models.Index(fields=("policy", "status"), name="idx_payment_policy_status"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.payment_method} {self.amount} ({self.status})"

    def clean(self):
        super().clean()
        errors: dict[str, str] = {}

        if not self.policy_id and not self.claim_id:
            errors["policy"] = "A payment must reference a policy or a claim."

        if self.claim_id and self.policy_id and self.claim.policy_id != self.policy_id:
            errors["claim"] = "Claim does not belong to the referenced policy."

        if self.payment_type == self.Type.CLAIM_SETTLEMENT:
            if self.policy_id:
                errors["policy"] = "Claim settlements are not premium and cannot reference a policy."
            if not self.claim_id:
                errors["claim"] = "Claim settlements must reference a claim."

        if self.policy_id and self.client_id and self.policy.client_id != self.client_id:
            errors["client"] = "Payment client must match the policy holder."

        if errors:
            raise ValidationError(errors)
