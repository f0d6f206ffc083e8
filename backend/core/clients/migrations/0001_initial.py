# Generated manually. Keep in sync with clients/models.py.

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_column="CREATED_AT")),
                ("updated_at", models.DateTimeField(auto_now=True, db_column="UPDATED_AT")),
                ("deleted_at", models.DateTimeField(blank=True, db_column="DELETED_AT", null=True)),
                ("first_name", models.CharField(db_column="FIRST_NAME", max_length=50, validators=[django.core.validators.MinLengthValidator(2)])),
                ("middle_name", models.CharField(blank=True, db_column="MIDDLE_NAME", max_length=50)),
                ("last_name", models.CharField(db_column="LAST_NAME", max_length=50, validators=[django.core.validators.MinLengthValidator(2)])),
                ("email", models.EmailField(db_column="EMAIL", max_length=254, unique=True)),
                ("phone", models.CharField(db_column="PHONE", max_length=20)),
                ("alternate_phone", models.CharField(blank=True, db_column="ALTERNATE_PHONE", max_length=20)),
                ("address", models.CharField(blank=True, db_column="ADDRESS", max_length=255)),
                ("city", models.CharField(blank=True, db_column="CITY", max_length=100)),
                ("state", models.CharField(blank=True, db_column="STATE", max_length=100)),
                ("postal_code", models.CharField(blank=True, db_column="POSTAL_CODE", max_length=20)),
                ("country", models.CharField(db_column="COUNTRY", default="Kenya", max_length=100)),
                ("date_of_birth", models.DateField(blank=True, db_column="DATE_OF_BIRTH", null=True)),
                ("gender", models.CharField(blank=True, choices=[("male", "Male"), ("female", "Female"), ("other", "Other")], db_column="GENDER", max_length=10)),
                ("id_number", models.CharField(db_column="ID_NUMBER", max_length=50, unique=True)),
                ("id_type", models.CharField(choices=[("national_id", "National ID"), ("passport", "Passport"), ("alien_id", "Alien ID"), ("company_reg", "Company registration")], db_column="ID_TYPE", default="national_id", max_length=20)),
                ("status", models.CharField(choices=[("active", "Active"), ("inactive", "Inactive"), ("suspended", "Suspended"), ("pending_verification", "Pending verification")], db_column="STATUS", default="pending_verification", max_length=30)),
                ("metadata", models.JSONField(blank=True, db_column="METADATA", default=dict)),
                ("created_by", models.ForeignKey(blank=True, db_column="CREATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("updated_by", models.ForeignKey(blank=True, db_column="UPDATED_BY", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("user", models.OneToOneField(blank=True, db_column="USER_ID", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="client_profile", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "EASY_CLIENT",
                "ordering": ("last_name", "first_name", "id"),
            },
        ),
        migrations.AddIndex(
            model_name="client",
            index=models.Index(fields=["status"], name="idx_client_status"),
        ),
        migrations.AddIndex(
            model_name="client",
            index=models.Index(fields=["last_name", "first_name"], name="idx_client_name"),
        ),
    ]
