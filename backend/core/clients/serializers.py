from django.contrib.auth import get_user_model
from rest_framework import serializers

from clients.models import Client


class ClientSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    user_id = serializers.PrimaryKeyRelatedField(
        source="user",
        queryset=get_user_model().objects.all(),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Client
        fields = (
            "id",
            "user_id",
            "first_name",
            "middle_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "alternate_phone",
            "address",
            "city",
            "state",
            "postal_code",
            "country",
            "date_of_birth",
            "gender",
            "id_number",
            "id_type",
            "status",
            "metadata",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "full_name", "created_at", "updated_at")
        # Uniqueness is checked after normalisation, in the model layer.
        extra_kwargs = {
            "email": {"validators": []},
            "id_number": {"validators": []},
        }
