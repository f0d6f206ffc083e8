import re

from django.contrib.auth.models import AbstractUser
from django.db import models

from accounts import rbac


class User(AbstractUser):
    class Role(models.TextChoices):
        ADMIN = rbac.ROLE_ADMIN, "Admin"
        AGENT = rbac.ROLE_AGENT, "Agent"
        CLIENT = rbac.ROLE_CLIENT, "Client"
        CLAIMS = rbac.ROLE_CLAIMS, "Claims officer"
        ACCOUNTANT = rbac.ROLE_ACCOUNTANT, "Accountant"

    email = models.EmailField(unique=True, db_column="EMAIL")
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.AGENT,
        db_column="ROLE",
    )
    phone = models.CharField(max_length=20, blank=True, db_column="PHONE")

    class Meta:
        db_table = "EASY_USER"
        ordering = ("username",)

    def __str__(self):
        return f"{self.username} ({self.role})"

    def clean(self):
        super().clean()
        self.email = (self.email or "").strip().lower()
        self.phone = re.sub(r"[^\d+]", "", self.phone or "")

    def has_role(self, *roles: str) -> bool:
        return self.role in roles
