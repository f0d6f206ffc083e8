from django.contrib import admin

from payments.models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "client",
        "policy",
        "claim",
        "amount",
        "payment_method",
        "payment_type",
        "status",
        "payment_date",
    )
    list_filter = ("status", "payment_method", "payment_type")
    search_fields = ("transaction_id", "mpesa_code", "client__last_name", "policy__policy_number")
    readonly_fields = ("validated_by", "validated_at")
