from django.contrib import admin

from commissions.models import Commission


@admin.register(Commission)
class CommissionAdmin(admin.ModelAdmin):
    list_display = ("id", "intermediary", "product", "amount", "period", "status", "due_date")
    list_filter = ("status", "commission_type", "period")
    search_fields = ("intermediary__name", "intermediary__code", "payment_reference")
    readonly_fields = ("processed_by", "paid_date")
