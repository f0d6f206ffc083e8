from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from django.utils import timezone

from common.models import BaseAuditModel
from insurance.calculations import outstanding_balance, payment_progress

_MIN_ZERO = MinValueValidator(Decimal("0.00"))

# Mirrors payments.Payment.Status.COMPLETED; kept literal to avoid an import cycle.
PAYMENT_COMPLETED = "COMPLETED"


class Policy(BaseAuditModel):
    """Bound cover with its premium, term and installment schedule."""

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", "Active"
        LAPSED = "LAPSED", "Lapsed"
        CANCELLED = "CANCELLED", "Cancelled"
        EXPIRED = "EXPIRED", "Expired"
        SUSPENDED = "SUSPENDED", "Suspended"

    class InstallmentFrequency(models.TextChoices):
        MONTHLY = "MONTHLY", "Monthly"
        QUARTERLY = "QUARTERLY", "Quarterly"
        SEMI_ANNUAL = "SEMI_ANNUAL", "Semi-annual"
        ANNUAL = "ANNUAL", "Annual"

    policy_number = models.CharField(max_length=60, unique=True, db_column="POLICY_NUMBER")
    quote = models.OneToOneField(
        "insurance.Quote",
        on_delete=models.PROTECT,
        related_name="policy",
        null=True,
        blank=True,
        db_column="QUOTE_ID",
    )
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="policies",
        db_column="CLIENT_ID",
    )
    product = models.ForeignKey(
        "insurance.Product",
        on_delete=models.PROTECT,
        related_name="policies",
        db_column="PRODUCT_ID",
    )
    intermediary = models.ForeignKey(
        "insurance.Intermediary",
        on_delete=models.SET_NULL,
        related_name="policies",
        null=True,
        blank=True,
        db_column="INTERMEDIARY_ID",
    )

    sum_insured = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[_MIN_ZERO], db_column="SUM_INSURED"
    )
    annual_premium = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[_MIN_ZERO], db_column="ANNUAL_PREMIUM"
    )
    adjusted_premium = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[_MIN_ZERO],
        db_column="ADJUSTED_PREMIUM",
    )
    down_payment = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[_MIN_ZERO],
        db_column="DOWN_PAYMENT",
    )
    installment_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[_MIN_ZERO],
        db_column="INSTALLMENT_AMOUNT",
    )
    installment_frequency = models.CharField(
        max_length=20,
        choices=InstallmentFrequency.choices,
        default=InstallmentFrequency.MONTHLY,
        db_column="INSTALLMENT_FREQUENCY",
    )
    total_installments = models.IntegerField(
        default=12, validators=[MinValueValidator(1)], db_column="TOTAL_INSTALLMENTS"
    )
    paid_installments = models.IntegerField(
        default=0, validators=[MinValueValidator(0)], db_column="PAID_INSTALLMENTS"
    )
    pending_installments = models.IntegerField(
        default=12, validators=[MinValueValidator(0)], db_column="PENDING_INSTALLMENTS"
    )
    overdue_installments = models.IntegerField(
        default=0, validators=[MinValueValidator(0)], db_column="OVERDUE_INSTALLMENTS"
    )

    policy_start_date = models.DateField(db_column="POLICY_START_DATE")
    policy_end_date = models.DateField(db_column="POLICY_END_DATE")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
        db_column="STATUS",
    )
    cancellation_date = models.DateField(null=True, blank=True, db_column="CANCELLATION_DATE")
    cancellation_reason = models.TextField(blank=True, db_column="CANCELLATION_REASON")
    is_valued = models.BooleanField(default=False, db_column="IS_VALUED")

    class Meta:
        db_table = "EASY_POLICY"
        ordering = ("-policy_start_date", "-id")
        verbose_name_plural = "Policies"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(policy_start_date__lt=models.F("policy_end_date")),
                name="ck_policy_start_before_end",
            ),
        ]
        indexes = [
            models.Index(fields=("status", "policy_end_date"), name="idx_policy_status_end"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.policy_number} ({self.status})"

    def clean(self):
        super().clean()
        errors: dict[str, str] = {}

        if (
            self.policy_start_date
            and self.policy_end_date
            and self.policy_start_date >= self.policy_end_date
        ):
            errors["policy_end_date"] = "policy_end_date must be after policy_start_date."

        if (
            self.cancellation_date
            and self.policy_start_date
            and self.cancellation_date < self.policy_start_date
        ):
            errors["cancellation_date"] = "cancellation_date cannot be before policy_start_date."

        if self.status == self.Status.CANCELLED and self.cancellation_date is None:
            errors["cancellation_date"] = "Cancelled policies require a cancellation_date."

        if errors:
            raise ValidationError(errors)

    @property
    def effective_premium(self) -> Decimal:
        if self.adjusted_premium is not None:
            return self.adjusted_premium
        return self.annual_premium

    def calculate_total_paid(self) -> Decimal:
        if self.pk is None:
            return Decimal("0.00")
        total = self.payments.filter(status=PAYMENT_COMPLETED).aggregate(total=Sum("amount"))["total"]
        return total or Decimal("0.00")

    def calculate_outstanding_balance(self) -> Decimal:
        return outstanding_balance(self.effective_premium, self.calculate_total_paid())

    def payment_progress(self) -> Decimal:
        return payment_progress(self.effective_premium, self.calculate_total_paid())

    def is_active(self, on: date | None = None) -> bool:
        on = on or timezone.localdate()
        return (
            self.status == self.Status.ACTIVE
            and self.policy_start_date <= on <= self.policy_end_date
        )
