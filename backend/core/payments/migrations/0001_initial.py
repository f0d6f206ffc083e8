# Generated manually. Keep in sync with payments/models.py.

from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("clients", "0001_initial"),
        ("insurance", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_column="CREATED_AT")),
                ("updated_at", models.DateTimeField(auto_now=True, db_column="UPDATED_AT")),
                ("deleted_at", models.DateTimeField(blank=True, db_column="DELETED_AT", null=True)),
                ("amount", models.DecimalField(db_column="AMOUNT", decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("payment_method", models.CharField(choices=[("MPESA", "M-Pesa"), ("BANK_TRANSFER", "Bank transfer"), ("CASH", "Cash"), ("CHEQUE", "Cheque"), ("CARD", "Card")], db_column="PAYMENT_METHOD", max_length=20)),
                ("payment_type", models.CharField(choices=[("DOWN_PAYMENT", "Down payment"), ("INSTALLMENT", "Installment"), ("FULL_PAYMENT", "Full payment"), ("ADJUSTMENT", "Adjustment"), ("CLAIM_SETTLEMENT", "Claim settlement")], db_column="PAYMENT_TYPE", default="INSTALLMENT", max_length=20)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("COMPLETED", "Completed"), ("FAILED", "Failed"), ("CANCELLED", "Cancelled"), ("REFUNDED", "Refunded")], db_column="STATUS", db_index=True, default="PENDING", max_length=20)),
                ("transaction_id", models.CharField(blank=True, db_column="TRANSACTION_ID", max_length=100, null=True, unique=True)),
                ("mpesa_code", models.CharField(blank=True, db_column="MPESA_CODE", max_length=30)),
                ("payment_date", models.DateTimeField(blank=True, db_column="PAYMENT_DATE", null=True)),
                ("due_date", models.DateField(blank=True, db_column="DUE_DATE", null=True)),
                ("installment_number", models.PositiveIntegerField(blank=True, db_column="INSTALLMENT_NUMBER", null=True)),
                ("validated_at", models.DateTimeField(blank=True, db_column="VALIDATED_AT", null=True)),
                ("notes", models.TextField(blank=True, db_column="NOTES")),
                ("created_by", models.ForeignKey(blank=True, db_column="CREATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("updated_by", models.ForeignKey(blank=True, db_column="UPDATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("validated_by", models.ForeignKey(blank=True, db_column="VALIDATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("client", models.ForeignKey(db_column="CLIENT_ID", on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="clients.client")),
                ("policy", models.ForeignKey(blank=True, db_column="POLICY_ID", null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="insurance.policy")),
                ("claim", models.ForeignKey(blank=True, db_column="CLAIM_ID", null=True, on_delete=django.db.models.deletion.PROTECT, related_name="payments", to="insurance.claim")),
            ],
            options={
                "db_table": "EASY_PAYMENT",
                "ordering": ("-payment_date", "-id"),
                "indexes": [
                    models.Index(fields=["client", "status"], name="idx_payment_client_status"),
                    models.Index(fields=["policy", "status"], name="idx_payment_policy_status"),
                ],
            },
        ),
    ]
