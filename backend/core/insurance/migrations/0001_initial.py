# Generated manually. Keep in sync with insurance/models/.

from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


def _audit_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("created_at", models.DateTimeField(auto_now_add=True, db_column="CREATED_AT")),
        ("updated_at", models.DateTimeField(auto_now=True, db_column="UPDATED_AT")),
        ("deleted_at", models.DateTimeField(blank=True, db_column="DELETED_AT", null=True)),
        ("created_by", models.ForeignKey(blank=True, db_column="CREATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
        ("updated_by", models.ForeignKey(blank=True, db_column="UPDATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
    ]


MIN_ZERO = django.core.validators.MinValueValidator(Decimal("0.00"))
MAX_PERCENT = django.core.validators.MaxValueValidator(Decimal("100.00"))


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("clients", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=_audit_fields() + [
                ("name", models.CharField(db_column="NAME", max_length=150)),
                ("code", models.CharField(db_column="CODE", max_length=30, unique=True)),
                ("category", models.CharField(choices=[("MOTOR", "Motor"), ("HEALTH", "Health"), ("LIFE", "Life"), ("PROPERTY", "Property"), ("TRAVEL", "Travel"), ("MARINE", "Marine"), ("LIABILITY", "Liability"), ("OTHER", "Other")], db_column="CATEGORY", default="OTHER", max_length=20)),
                ("description", models.TextField(blank=True, db_column="DESCRIPTION")),
                ("base_rate", models.DecimalField(db_column="BASE_RATE", decimal_places=4, default=Decimal("0.0000"), max_digits=7, validators=[MIN_ZERO, MAX_PERCENT])),
                ("minimum_premium", models.DecimalField(db_column="MINIMUM_PREMIUM", decimal_places=2, default=Decimal("0.00"), max_digits=14, validators=[MIN_ZERO])),
                ("commission_rate", models.DecimalField(db_column="COMMISSION_RATE", decimal_places=2, default=Decimal("0.00"), max_digits=5, validators=[MIN_ZERO, MAX_PERCENT])),
                ("tax_rate", models.DecimalField(db_column="TAX_RATE", decimal_places=2, default=Decimal("0.00"), max_digits=5, validators=[MIN_ZERO, MAX_PERCENT])),
                ("status", models.CharField(choices=[("DRAFT", "Draft"), ("PENDING_APPROVAL", "Pending approval"), ("ACTIVE", "Active"), ("INACTIVE", "Inactive"), ("ARCHIVED", "Archived")], db_column="STATUS", default="DRAFT", max_length=20)),
                ("effective_date", models.DateField(db_column="EFFECTIVE_DATE", default=django.utils.timezone.localdate)),
                ("expiry_date", models.DateField(blank=True, db_column="EXPIRY_DATE", null=True)),
                ("approved_at", models.DateTimeField(blank=True, db_column="APPROVED_AT", null=True)),
                ("approved_by", models.ForeignKey(blank=True, db_column="APPROVED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={"db_table": "EASY_PRODUCT", "ordering": ("name", "id")},
        ),
        migrations.CreateModel(
            name="Intermediary",
            fields=_audit_fields() + [
                ("name", models.CharField(db_column="NAME", max_length=150)),
                ("code", models.CharField(db_column="CODE", max_length=30, unique=True)),
                ("intermediary_type", models.CharField(choices=[("agent", "Agent"), ("broker", "Broker"), ("bancassurance", "Bancassurance"), ("direct", "Direct")], db_column="TYPE", default="agent", max_length=20)),
                ("email", models.EmailField(blank=True, db_column="EMAIL", max_length=254)),
                ("phone", models.CharField(blank=True, db_column="PHONE", max_length=20)),
                ("license_number", models.CharField(blank=True, db_column="LICENSE_NUMBER", max_length=50)),
                ("license_expiry_date", models.DateField(blank=True, db_column="LICENSE_EXPIRY_DATE", null=True)),
                ("commission_rate", models.DecimalField(db_column="COMMISSION_RATE", decimal_places=2, default=Decimal("0.00"), max_digits=5, validators=[MIN_ZERO, MAX_PERCENT])),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive"), ("suspended", "Suspended")], db_column="STATUS", default="active", max_length=20)),
            ],
            options={"db_table": "EASY_INTERMEDIARY", "ordering": ("name", "id"), "verbose_name_plural": "Intermediaries"},
        ),
        migrations.CreateModel(
            name="Quote",
            fields=_audit_fields() + [
                ("quote_number", models.CharField(db_column="QUOTE_NUMBER", max_length=50, unique=True)),
                ("sum_insured", models.DecimalField(db_column="SUM_INSURED", decimal_places=2, max_digits=14, validators=[MIN_ZERO])),
                ("base_premium", models.DecimalField(db_column="BASE_PREMIUM", decimal_places=2, max_digits=14, validators=[MIN_ZERO])),
                ("total_premium", models.DecimalField(db_column="TOTAL_PREMIUM", decimal_places=2, default=Decimal("0.00"), max_digits=14, validators=[MIN_ZERO])),
                ("rate", models.DecimalField(blank=True, db_column="RATE", decimal_places=4, max_digits=7, null=True, validators=[MIN_ZERO, django.core.validators.MaxValueValidator(Decimal("100"))])),
                ("loadings", models.JSONField(blank=True, db_column="LOADINGS", default=list)),
                ("discounts", models.JSONField(blank=True, db_column="DISCOUNTS", default=list)),
                ("taxes", models.JSONField(blank=True, db_column="TAXES", default=list)),
                ("fees", models.JSONField(blank=True, db_column="FEES", default=list)),
                ("valid_from", models.DateTimeField(db_column="VALID_FROM")),
                ("valid_to", models.DateTimeField(db_column="VALID_TO")),
                ("status", models.CharField(choices=[("DRAFT", "Draft"), ("PENDING", "Pending"), ("APPROVED", "Approved"), ("CONVERTED", "Converted"), ("DECLINED", "Declined"), ("EXPIRED", "Expired")], db_column="STATUS", db_index=True, default="DRAFT", max_length=20)),
                ("notes", models.TextField(blank=True, db_column="NOTES")),
                ("client_notes", models.TextField(blank=True, db_column="CLIENT_NOTES")),
                ("decline_reason", models.TextField(blank=True, db_column="DECLINE_REASON")),
                ("converted_at", models.DateTimeField(blank=True, db_column="CONVERTED_AT", null=True)),
                ("approved_at", models.DateTimeField(blank=True, db_column="APPROVED_AT", null=True)),
                ("client", models.ForeignKey(db_column="CLIENT_ID", on_delete=django.db.models.deletion.PROTECT, related_name="quotes", to="clients.client")),
                ("product", models.ForeignKey(db_column="PRODUCT_ID", on_delete=django.db.models.deletion.PROTECT, related_name="quotes", to="insurance.product")),
                ("intermediary", models.ForeignKey(blank=True, db_column="INTERMEDIARY_ID", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="quotes", to="insurance.intermediary")),
                ("converted_by", models.ForeignKey(blank=True, db_column="CONVERTED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("approved_by", models.ForeignKey(blank=True, db_column="APPROVED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "EASY_QUOTE",
                "ordering": ("-created_at", "-id"),
                "indexes": [models.Index(fields=["status", "valid_to"], name="idx_quote_status_valid_to")],
            },
        ),
        migrations.CreateModel(
            name="Policy",
            fields=_audit_fields() + [
                ("policy_number", models.CharField(db_column="POLICY_NUMBER", max_length=60, unique=True)),
                ("sum_insured", models.DecimalField(db_column="SUM_INSURED", decimal_places=2, max_digits=14, validators=[MIN_ZERO])),
                ("annual_premium", models.DecimalField(db_column="ANNUAL_PREMIUM", decimal_places=2, max_digits=14, validators=[MIN_ZERO])),
                ("adjusted_premium", models.DecimalField(blank=True, db_column="ADJUSTED_PREMIUM", decimal_places=2, max_digits=14, null=True, validators=[MIN_ZERO])),
                ("down_payment", models.DecimalField(db_column="DOWN_PAYMENT", decimal_places=2, default=Decimal("0.00"), max_digits=14, validators=[MIN_ZERO])),
                ("installment_amount", models.DecimalField(db_column="INSTALLMENT_AMOUNT", decimal_places=2, default=Decimal("0.00"), max_digits=14, validators=[MIN_ZERO])),
                ("installment_frequency", models.CharField(choices=[("MONTHLY", "Monthly"), ("QUARTERLY", "Quarterly"), ("SEMI_ANNUAL", "Semi-annual"), ("ANNUAL", "Annual")], db_column="INSTALLMENT_FREQUENCY", default="MONTHLY", max_length=20)),
                ("total_installments", models.IntegerField(db_column="TOTAL_INSTALLMENTS", default=12, validators=[django.core.validators.MinValueValidator(1)])),
                ("paid_installments", models.IntegerField(db_column="PAID_INSTALLMENTS", default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ("pending_installments", models.IntegerField(db_column="PENDING_INSTALLMENTS", default=12, validators=[django.core.validators.MinValueValidator(0)])),
                ("overdue_installments", models.IntegerField(db_column="OVERDUE_INSTALLMENTS", default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ("policy_start_date", models.DateField(db_column="POLICY_START_DATE")),
                ("policy_end_date", models.DateField(db_column="POLICY_END_DATE")),
                ("status", models.CharField(choices=[("ACTIVE", "Active"), ("LAPSED", "Lapsed"), ("CANCELLED", "Cancelled"), ("EXPIRED", "Expired"), ("SUSPENDED", "Suspended")], db_column="STATUS", db_index=True, default="ACTIVE", max_length=20)),
                ("cancellation_date", models.DateField(blank=True, db_column="CANCELLATION_DATE", null=True)),
                ("cancellation_reason", models.TextField(blank=True, db_column="CANCELLATION_REASON")),
                ("is_valued", models.BooleanField(db_column="IS_VALUED", default=False)),
                ("quote", models.OneToOneField(blank=True, db_column="QUOTE_ID", null=True, on_delete=django.db.models.deletion.PROTECT, related_name="policy", to="insurance.quote")),
                ("client", models.ForeignKey(db_column="CLIENT_ID", on_delete=django.db.models.deletion.PROTECT, related_name="policies", to="clients.client")),
                ("product", models.ForeignKey(db_column="PRODUCT_ID", on_delete=django.db.models.deletion.PROTECT, related_name="policies", to="insurance.product")),
                ("intermediary", models.ForeignKey(blank=True, db_column="INTERMEDIARY_ID", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="policies", to="insurance.intermediary")),
            ],
            options={
                "db_table": "EASY_POLICY",
                "ordering": ("-policy_start_date", "-id"),
                "verbose_name_plural": "Policies",
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("policy_start_date__lt", models.F("policy_end_date"))), name="ck_policy_start_before_end"),
                ],
                "indexes": [models.Index(fields=["status", "policy_end_date"], name="idx_policy_status_end")],
            },
        ),
        migrations.CreateModel(
            name="Claim",
            fields=_audit_fields() + [
                ("claim_number", models.CharField(db_column="CLAIM_NUMBER", max_length=30, unique=True)),
                ("date_of_loss", models.DateField(db_column="DATE_OF_LOSS")),
                ("date_reported", models.DateField(db_column="DATE_REPORTED", default=django.utils.timezone.localdate)),
                ("description", models.TextField(db_column="DESCRIPTION")),
                ("location", models.CharField(blank=True, db_column="LOCATION", max_length=255)),
                ("estimated_amount", models.DecimalField(db_column="ESTIMATED_AMOUNT", decimal_places=2, max_digits=14, validators=[MIN_ZERO])),
                ("approved_amount", models.DecimalField(blank=True, db_column="APPROVED_AMOUNT", decimal_places=2, max_digits=14, null=True, validators=[MIN_ZERO])),
                ("paid_amount", models.DecimalField(db_column="PAID_AMOUNT", decimal_places=2, default=Decimal("0.00"), max_digits=14, validators=[MIN_ZERO])),
                ("status", models.CharField(choices=[("DRAFT", "Draft"), ("SUBMITTED", "Submitted"), ("UNDER_REVIEW", "Under review"), ("APPROVED", "Approved"), ("REJECTED", "Rejected"), ("PAID", "Paid"), ("CLOSED", "Closed")], db_column="STATUS", db_index=True, default="DRAFT", max_length=20)),
                ("rejection_reason", models.TextField(blank=True, db_column="REJECTION_REASON")),
                ("date_assigned", models.DateTimeField(blank=True, db_column="DATE_ASSIGNED", null=True)),
                ("date_completed", models.DateTimeField(blank=True, db_column="DATE_COMPLETED", null=True)),
                ("police_report_number", models.CharField(blank=True, db_column="POLICE_REPORT_NUMBER", max_length=50)),
                ("is_police_report", models.BooleanField(db_column="IS_POLICE_REPORT", default=False)),
                ("metadata", models.JSONField(blank=True, db_column="METADATA", default=dict)),
                ("policy", models.ForeignKey(db_column="POLICY_ID", on_delete=django.db.models.deletion.PROTECT, related_name="claims", to="insurance.policy")),
                ("client", models.ForeignKey(db_column="CLIENT_ID", on_delete=django.db.models.deletion.PROTECT, related_name="claims", to="clients.client")),
                ("assigned_to", models.ForeignKey(blank=True, db_column="ASSIGNED_TO", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="assigned_claims", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "EASY_CLAIM",
                "ordering": ("-date_reported", "-id"),
                "indexes": [models.Index(fields=["status", "date_reported"], name="idx_claim_status_reported")],
            },
        ),
    ]
