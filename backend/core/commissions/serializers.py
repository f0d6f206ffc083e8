from rest_framework import serializers

from commissions.models import Commission


class CommissionSerializer(serializers.ModelSerializer):
    intermediary_name = serializers.CharField(source="intermediary.name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = Commission
        fields = (
            "id",
            "intermediary",
            "intermediary_name",
            "product",
            "product_name",
            "policy",
            "amount",
            "rate",
            "commission_type",
            "period",
            "due_date",
            "paid_date",
            "status",
            "payment_reference",
            "notes",
            "processed_by",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "paid_date",
            "status",
            "payment_reference",
            "processed_by",
            "created_at",
            "updated_at",
        )
        extra_kwargs = {
            # The sign is checked by the service before anything is written.
            "amount": {"required": False, "allow_null": True, "min_value": None, "validators": []},
            "product": {"required": False},
            "intermediary": {"required": False},
            "period": {"required": False},
            "due_date": {"required": False},
        }


class CommissionMarkPaidSerializer(serializers.Serializer):
    payment_reference = serializers.CharField(max_length=100)
    payment_date = serializers.DateTimeField(required=False)


class CommissionDisputeSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True)


class CommissionProcessSerializer(serializers.Serializer):
    commission_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    payment_reference = serializers.CharField(max_length=100)
    payment_date = serializers.DateTimeField(required=False)


class CommissionCalculateSerializer(serializers.Serializer):
    premium = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100)
