from __future__ import annotations

from rest_framework import serializers

from insurance.models import Policy


class PolicySerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.full_name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    effective_premium = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    total_paid = serializers.SerializerMethodField()
    outstanding_balance = serializers.SerializerMethodField()
    payment_progress = serializers.SerializerMethodField()

    class Meta:
        model = Policy
        fields = (
            "id",
            "policy_number",
            "quote",
            "client",
            "client_name",
            "product",
            "product_name",
            "intermediary",
            "sum_insured",
            "annual_premium",
            "adjusted_premium",
            "effective_premium",
            "down_payment",
            "installment_amount",
            "installment_frequency",
            "total_installments",
            "paid_installments",
            "pending_installments",
            "overdue_installments",
            "policy_start_date",
            "policy_end_date",
            "status",
            "cancellation_date",
            "cancellation_reason",
            "is_valued",
            "total_paid",
            "outstanding_balance",
            "payment_progress",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "quote",
            "status",
            "pending_installments",
            "cancellation_date",
            "cancellation_reason",
            "created_at",
            "updated_at",
        )
        extra_kwargs = {"policy_number": {"validators": []}}

    def get_total_paid(self, obj):
        return str(obj.calculate_total_paid())

    def get_outstanding_balance(self, obj):
        return str(obj.calculate_outstanding_balance())

    def get_payment_progress(self, obj):
        return str(obj.payment_progress())


class PolicyCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)
    cancellation_date = serializers.DateField(required=False)


class PolicyTransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Policy.Status.choices)
    reason = serializers.CharField(required=False, allow_blank=True)
    cancellation_date = serializers.DateField(required=False)
