from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinLengthValidator
from django.db import models
from django.utils import timezone

from common.models import BaseAuditModel


class Client(BaseAuditModel):
    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        SUSPENDED = "suspended", "Suspended"
        PENDING_VERIFICATION = "pending_verification", "Pending verification"

    class Gender(models.TextChoices):
        MALE = "male", "Male"
        FEMALE = "female", "Female"
        OTHER = "other", "Other"

    class IdType(models.TextChoices):
        NATIONAL_ID = "national_id", "National ID"
        PASSPORT = "passport", "Passport"
        ALIEN_ID = "alien_id", "Alien ID"
        COMPANY_REG = "company_reg", "Company registration"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="client_profile",
        null=True,
        blank=True,
        db_column="USER_ID",
    )
    first_name = models.CharField(
        max_length=50, validators=[MinLengthValidator(2)], db_column="FIRST_NAME"
    )
    middle_name = models.CharField(max_length=50, blank=True, db_column="MIDDLE_NAME")
    last_name = models.CharField(
        max_length=50, validators=[MinLengthValidator(2)], db_column="LAST_NAME"
    )
    email = models.EmailField(unique=True, db_column="EMAIL")
    phone = models.CharField(max_length=20, db_column="PHONE")
    alternate_phone = models.CharField(max_length=20, blank=True, db_column="ALTERNATE_PHONE")
    address = models.CharField(max_length=255, blank=True, db_column="ADDRESS")
    city = models.CharField(max_length=100, blank=True, db_column="CITY")
    state = models.CharField(max_length=100, blank=True, db_column="STATE")
    postal_code = models.CharField(max_length=20, blank=True, db_column="POSTAL_CODE")
    country = models.CharField(max_length=100, default="Kenya", db_column="COUNTRY")
    date_of_birth = models.DateField(null=True, blank=True, db_column="DATE_OF_BIRTH")
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True, db_column="GENDER")
    id_number = models.CharField(max_length=50, unique=True, db_column="ID_NUMBER")
    id_type = models.CharField(
        max_length=20,
        choices=IdType.choices,
        default=IdType.NATIONAL_ID,
        db_column="ID_TYPE",
    )
    status = models.CharField(
        max_length=30,
        choices=Status.choices,
        default=Status.PENDING_VERIFICATION,
        db_column="STATUS",
    )
    metadata = models.JSONField(default=dict, blank=True, db_column="METADATA")

    class Meta:
        db_table = "EASY_CLIENT"
        ordering = ("last_name", "first_name", "id")
        indexes = [
            models.Index(fields=("status",), name="idx_client_status"),
            models.Index(fields=("last_name", "first_name"), name="idx_client_name"),
        ]

    def __str__(self):
        return f"{self.full_name} <{self.email}>"

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(part for part in parts if part)

    def clean(self):
        errors = {}
        if self.date_of_birth and self.date_of_birth >= timezone.localdate():
            errors["date_of_birth"] = "Date of birth must be in the past."
        if self.phone and len(self.phone) < 9:
            errors["phone"] = "Phone number is too short."
        if errors:
            raise ValidationError(errors)
