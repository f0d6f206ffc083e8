from django.conf import settings
from django.db import models
from django.utils import timezone

from common.managers import SoftDeleteManager, SoftDeleteQuerySet


class BaseAuditModel(models.Model):
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        null=True,
        blank=True,
        db_column="CREATED_BY",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="+",
        null=True,
        blank=True,
        db_column="UPDATED_BY",
    )
    created_at = models.DateTimeField(auto_now_add=True, db_column="CREATED_AT")
    updated_at = models.DateTimeField(auto_now=True, db_column="UPDATED_AT")
    deleted_at = models.DateTimeField(null=True, blank=True, db_column="DELETED_AT")

    objects = SoftDeleteManager()
    all_objects = models.Manager.from_queryset(SoftDeleteQuerySet)()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, *, actor=None):
        self.deleted_at = timezone.now()
        update_fields = ["deleted_at", "updated_at"]
        if actor is not None and getattr(actor, "is_authenticated", False):
            self.updated_by = actor
            update_fields.append("updated_by")
        self.save(update_fields=update_fields)
