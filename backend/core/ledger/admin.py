from django.contrib import admin

from ledger.models import LedgerEntry


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "chain_id",
        "action",
        "event_type",
        "resource_label",
        "resource_pk",
        "occurred_at",
        "actor_username",
    )
    list_filter = ("chain_id", "action")
    search_fields = ("event_type", "resource_label", "resource_pk", "actor_username")
    ordering = ("-occurred_at", "-id")
    readonly_fields = [field.name for field in LedgerEntry._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
