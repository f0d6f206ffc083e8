from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from common.models import BaseAuditModel


class Intermediary(BaseAuditModel):
    class Type(models.TextChoices):
        AGENT = "agent", "Agent"
        BROKER = "broker", "Broker"
        BANCASSURANCE = "bancassurance", "Bancassurance"
        DIRECT = "direct", "Direct"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        SUSPENDED = "suspended", "Suspended"

    name = models.CharField(max_length=150, db_column="NAME")
    code = models.CharField(max_length=30, unique=True, db_column="CODE")
    intermediary_type = models.CharField(
        max_length=20, choices=Type.choices, default=Type.AGENT, db_column="TYPE"
    )
    email = models.EmailField(blank=True, db_column="EMAIL")
    phone = models.CharField(max_length=20, blank=True, db_column="PHONE")
    license_number = models.CharField(max_length=50, blank=True, db_column="LICENSE_NUMBER")
    license_expiry_date = models.DateField(null=True, blank=True, db_column="LICENSE_EXPIRY_DATE")
    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
        db_column="COMMISSION_RATE",
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE, db_column="STATUS"
    )

    class Meta:
        db_table = "EASY_INTERMEDIARY"
        ordering = ("name", "id")
        verbose_name_plural = "Intermediaries"

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

    def has_valid_license(self, on: date | None = None) -> bool:
        if not self.license_number:
            return False
        if self.license_expiry_date is None:
            return True
        return self.license_expiry_date >= (on or timezone.localdate())
