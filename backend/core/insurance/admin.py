from django.contrib import admin

from insurance.models import Claim, Intermediary, Policy, Product, Quote


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "category", "status", "effective_date", "expiry_date")
    list_filter = ("category", "status")
    search_fields = ("code", "name")


@admin.register(Intermediary)
class IntermediaryAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "intermediary_type", "commission_rate", "status")
    list_filter = ("intermediary_type", "status")
    search_fields = ("code", "name", "license_number")


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ("id", "quote_number", "client", "product", "total_premium", "status", "valid_to")
    list_filter = ("status", "product")
    search_fields = ("quote_number", "client__last_name", "client__email")
    readonly_fields = ("total_premium", "converted_at", "converted_by", "approved_at", "approved_by")


@admin.register(Policy)
class PolicyAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "policy_number",
        "client",
        "product",
        "status",
        "policy_start_date",
        "policy_end_date",
    )
    list_filter = ("status", "product", "installment_frequency")
    search_fields = ("policy_number", "client__last_name", "client__email")
    readonly_fields = ("pending_installments",)


@admin.register(Claim)
class ClaimAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "claim_number",
        "policy",
        "status",
        "estimated_amount",
        "approved_amount",
        "paid_amount",
    )
    list_filter = ("status",)
    search_fields = ("claim_number", "policy__policy_number")
    readonly_fields = ("paid_amount", "date_assigned", "date_completed")
