from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from common.models import BaseAuditModel

_MIN_ZERO = MinValueValidator(Decimal("0.00"))
_MAX_PERCENT = MaxValueValidator(Decimal("100.00"))


class Product(BaseAuditModel):
    class Category(models.TextChoices):
        MOTOR = "MOTOR", "Motor"
        HEALTH = "HEALTH", "Health"
        LIFE = "LIFE", "Life"
        PROPERTY = "PROPERTY", "Property"
        TRAVEL = "TRAVEL", "Travel"
        MARINE = "MARINE", "Marine"
        LIABILITY = "LIABILITY", "Liability"
        OTHER = "OTHER", "Other"

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        PENDING_APPROVAL = "PENDING_APPROVAL", "Pending approval"
        ACTIVE = "ACTIVE", "Active"
        INACTIVE = "INACTIVE", "Inactive"
        ARCHIVED = "ARCHIVED", "Archived"

    name = models.CharField(max_length=150, db_column="NAME")
    code = models.CharField(max_length=30, unique=True, db_column="CODE")
    category = models.CharField(
        max_length=20, choices=Category.choices, default=Category.OTHER, db_column="CATEGORY"
    )
    description = models.TextField(blank=True, db_column="DESCRIPTION")
    base_rate = models.DecimalField(
        max_digits=7,
        decimal_places=4,
        default=Decimal("0.0000"),
        validators=[_MIN_ZERO, _MAX_PERCENT],
        db_column="BASE_RATE",
    )
    minimum_premium = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[_MIN_ZERO],
        db_column="MINIMUM_PREMIUM",
    )
    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[_MIN_ZERO, _MAX_PERCENT],
        db_column="COMMISSION_RATE",
    )
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[_MIN_ZERO, _MAX_PERCENT],
        db_column="TAX_RATE",
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.DRAFT, db_column="STATUS"
    )
    effective_date = models.DateField(default=timezone.localdate, db_column="EFFECTIVE_DATE")
    expiry_date = models.DateField(null=True, blank=True, db_column="EXPIRY_DATE")
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
        db_table = "EASY_PRODUCT"
        ordering = ("name", "id")

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

    def clean(self):
        super().clean()
        if self.expiry_date and self.effective_date and self.expiry_date <= self.effective_date:
            raise ValidationError({"expiry_date": "expiry_date must be after effective_date."})

    def is_available(self, on: date | None = None) -> bool:
        on = on or timezone.localdate()
        if self.status != self.Status.ACTIVE:
            return False
        if self.effective_date and on < self.effective_date:
            return False
        return self.expiry_date is None or on <= self.expiry_date
