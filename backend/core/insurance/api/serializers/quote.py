from __future__ import annotations

from rest_framework import serializers

from insurance.models import Quote
from insurance.selectors.quote_selector import RANGE_CHOICES


class AdjustmentSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=100)
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True, min_value=0
    )
    rate = serializers.DecimalField(
        max_digits=7, decimal_places=4, required=False, allow_null=True, min_value=0
    )

    def validate(self, attrs):
        if attrs.get("amount") is None and attrs.get("rate") is None:
            raise serializers.ValidationError("Each adjustment needs an amount or a rate.")
        # JSON columns store plain strings, not Decimal.
        return {
            key: (str(value) if key in ("amount", "rate") else value)
            for key, value in attrs.items()
            if value is not None
        }


class QuoteSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.full_name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    loadings = AdjustmentSerializer(many=True, required=False)
    discounts = AdjustmentSerializer(many=True, required=False)
    taxes = AdjustmentSerializer(many=True, required=False)
    fees = AdjustmentSerializer(many=True, required=False)
    is_valid = serializers.SerializerMethodField()

    class Meta:
        model = Quote
        fields = (
            "id",
            "quote_number",
            "client",
            "client_name",
            "product",
            "product_name",
            "intermediary",
            "sum_insured",
            "base_premium",
            "total_premium",
            "rate",
            "loadings",
            "discounts",
            "taxes",
            "fees",
            "valid_from",
            "valid_to",
            "status",
            "notes",
            "client_notes",
            "decline_reason",
            "approved_at",
            "converted_at",
            "is_valid",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "total_premium",
            "status",
            "decline_reason",
            "approved_at",
            "converted_at",
            "created_at",
            "updated_at",
        )
        extra_kwargs = {
            "quote_number": {"required": False, "validators": []},
            "valid_from": {"required": False},
            "valid_to": {"required": False},
        }

    def get_is_valid(self, obj) -> bool:
        return obj.is_valid()


class QuoteDeclineSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True)


class QuoteConvertSerializer(serializers.Serializer):
    down_payment = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, min_value=0
    )
    installment_frequency = serializers.ChoiceField(
        choices=("MONTHLY", "QUARTERLY", "SEMI_ANNUAL", "ANNUAL"), required=False
    )
    total_installments = serializers.IntegerField(required=False, min_value=1)
    policy_end_date = serializers.DateField(required=False)
    is_valued = serializers.BooleanField(required=False)


class QuoteStatsQuerySerializer(serializers.Serializer):
    range = serializers.ChoiceField(choices=RANGE_CHOICES, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if bool(start) != bool(end):
            raise serializers.ValidationError("start_date and end_date must be provided together.")
        if start and end and start > end:
            raise serializers.ValidationError({"end_date": "end_date must be on or after start_date."})
        return attrs
