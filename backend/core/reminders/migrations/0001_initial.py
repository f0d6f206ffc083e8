# Generated manually. Keep in sync with reminders/models.py.

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("insurance", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Reminder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_column="CREATED_AT")),
                ("updated_at", models.DateTimeField(auto_now=True, db_column="UPDATED_AT")),
                ("deleted_at", models.DateTimeField(blank=True, db_column="DELETED_AT", null=True)),
                ("reminder_type", models.CharField(choices=[("payment_due", "Payment due"), ("policy_expiry", "Policy expiry"), ("document_required", "Document required"), ("cancellation_warning", "Cancellation warning")], db_column="REMINDER_TYPE", max_length=30)),
                ("trigger_days", models.IntegerField(db_column="TRIGGER_DAYS", validators=[django.core.validators.MinValueValidator(0)])),
                ("email_enabled", models.BooleanField(db_column="EMAIL_ENABLED", default=True)),
                ("sms_enabled", models.BooleanField(db_column="SMS_ENABLED", default=True)),
                ("email_subject", models.CharField(blank=True, db_column="EMAIL_SUBJECT", max_length=255)),
                ("email_template", models.TextField(blank=True, db_column="EMAIL_TEMPLATE")),
                ("sms_template", models.TextField(blank=True, db_column="SMS_TEMPLATE")),
                ("is_active", models.BooleanField(db_column="IS_ACTIVE", default=True)),
                ("completed_at", models.DateTimeField(blank=True, db_column="COMPLETED_AT", null=True)),
                ("created_by", models.ForeignKey(blank=True, db_column="CREATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("updated_by", models.ForeignKey(blank=True, db_column="UPDATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("product", models.ForeignKey(db_column="PRODUCT_ID", on_delete=django.db.models.deletion.CASCADE, related_name="reminders", to="insurance.product")),
            ],
            options={
                "db_table": "EASY_REMINDER",
                "ordering": ("product_id", "reminder_type", "trigger_days"),
                "indexes": [models.Index(fields=["is_active", "reminder_type"], name="idx_reminder_active_type")],
            },
        ),
    ]
