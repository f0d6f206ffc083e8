from __future__ import annotations

from rest_framework import serializers

from insurance.models import Intermediary, Product


class ProductSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source="get_category_display", read_only=True)
    is_available = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = (
            "id",
            "name",
            "code",
            "category",
            "category_display",
            "description",
            "base_rate",
            "minimum_premium",
            "commission_rate",
            "tax_rate",
            "status",
            "effective_date",
            "expiry_date",
            "approved_at",
            "is_available",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "status", "approved_at", "created_at", "updated_at")
        extra_kwargs = {"code": {"validators": []}}

    def get_is_available(self, obj) -> bool:
        return obj.is_available()


class IntermediarySerializer(serializers.ModelSerializer):
    has_valid_license = serializers.SerializerMethodField()

    class Meta:
        model = Intermediary
        fields = (
            "id",
            "name",
            "code",
            "intermediary_type",
            "email",
            "phone",
            "license_number",
            "license_expiry_date",
            "has_valid_license",
            "commission_rate",
            "status",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")
        extra_kwargs = {"code": {"validators": []}}

    def get_has_valid_license(self, obj) -> bool:
        return obj.has_valid_license()
