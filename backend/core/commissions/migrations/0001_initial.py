# Generated manually. Keep in sync with commissions/models.py.

from decimal import Decimal

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
            name="Commission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_column="CREATED_AT")),
                ("updated_at", models.DateTimeField(auto_now=True, db_column="UPDATED_AT")),
                ("deleted_at", models.DateTimeField(blank=True, db_column="DELETED_AT", null=True)),
                ("amount", models.DecimalField(db_column="AMOUNT", decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("rate", models.DecimalField(db_column="RATE", decimal_places=2, max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal("0.00")), django.core.validators.MaxValueValidator(Decimal("100.00"))])),
                ("commission_type", models.CharField(choices=[("NEW_BUSINESS", "New business"), ("RENEWAL", "Renewal"), ("BONUS", "Bonus"), ("OVERRIDE", "Override"), ("ADJUSTMENT", "Adjustment"), ("CLAWBACK", "Clawback")], db_column="COMMISSION_TYPE", default="NEW_BUSINESS", max_length=20)),
                ("period", models.CharField(db_column="PERIOD", max_length=7, validators=[django.core.validators.RegexValidator("^\\d{4}-(0[1-9]|1[0-2])$", "Period must be YYYY-MM.")])),
                ("due_date", models.DateField(db_column="DUE_DATE")),
                ("paid_date", models.DateTimeField(blank=True, db_column="PAID_DATE", null=True)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("APPROVED", "Approved"), ("PROCESSING", "Processing"), ("PAID", "Paid"), ("CANCELLED", "Cancelled"), ("DISPUTED", "Disputed")], db_column="STATUS", db_index=True, default="PENDING", max_length=20)),
                ("payment_reference", models.CharField(blank=True, db_column="PAYMENT_REFERENCE", max_length=100)),
                ("notes", models.TextField(blank=True, db_column="NOTES")),
                ("created_by", models.ForeignKey(blank=True, db_column="CREATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("updated_by", models.ForeignKey(blank=True, db_column="UPDATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("processed_by", models.ForeignKey(blank=True, db_column="PROCESSED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("intermediary", models.ForeignKey(db_column="INTERMEDIARY_ID", on_delete=django.db.models.deletion.PROTECT, related_name="commissions", to="insurance.intermediary")),
                ("product", models.ForeignKey(db_column="PRODUCT_ID", on_delete=django.db.models.deletion.PROTECT, related_name="commissions", to="insurance.product")),
                ("policy", models.ForeignKey(blank=True, db_column="POLICY_ID", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="commissions", to="insurance.policy")),
            ],
            options={
                "db_table": "EASY_COMMISSION",
                "ordering": ("-due_date", "-id"),
                "indexes": [
                    models.Index(fields=["intermediary", "status"], name="idx_commission_interm_status"),
                    models.Index(fields=["period"], name="idx_commission_period"),
                ],
            },
        ),
    ]
