from django.core.validators import MinValueValidator
from django.db import models

from common.models import BaseAuditModel


class Reminder(BaseAuditModel):
    """Notification rule for a product, fired ``trigger_days`` before its event."""

    class Type(models.TextChoices):
        PAYMENT_DUE = "payment_due", "Payment due"
        POLICY_EXPIRY = "policy_expiry", "Policy expiry"
        DOCUMENT_REQUIRED = "document_required", "Document required"
        CANCELLATION_WARNING = "cancellation_warning", "Cancellation warning"

    product = models.ForeignKey(
        "insurance.Product",
        on_delete=models.CASCADE,
        related_name="reminders",
        db_column="PRODUCT_ID",
    )
    reminder_type = models.CharField(max_length=30, choices=Type.choices, db_column="REMINDER_TYPE")
    trigger_days = models.IntegerField(validators=[MinValueValidator(0)], db_column="TRIGGER_DAYS")
    email_enabled = models.BooleanField(default=True, db_column="EMAIL_ENABLED")
    sms_enabled = models.BooleanField(default=True, db_column="SMS_ENABLED")
    email_subject = models.CharField(max_length=255, blank=True, db_column="EMAIL_SUBJECT")
    email_template = models.TextField(blank=True, db_column="EMAIL_TEMPLATE")
    sms_template = models.TextField(blank=True, db_column="SMS_TEMPLATE")
    is_active = models.BooleanField(default=True, db_column="IS_ACTIVE")
    completed_at = models.DateTimeField(null=True, blank=True, db_column="COMPLETED_AT")

    class Meta:
        db_table = "EASY_REMINDER"
        ordering = ("product_id", "reminder_type", "trigger_days")
        indexes = [
            models.Index(fields=("is_active", "reminder_type"), name="idx_reminder_active_type"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.product_id} {self.reminder_type} -{self.trigger_days}d"

    @property
    def channels(self) -> tuple[str, ...]:
        enabled = []
        if self.email_enabled:
            enabled.append("email")
        if self.sms_enabled:
            enabled.append("sms")
        return tuple(enabled)
