from rest_framework import serializers

from payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    client_name = serializers.CharField(source="client.full_name", read_only=True)
    policy_number = serializers.CharField(source="policy.policy_number", read_only=True, default=None)
    claim_number = serializers.CharField(source="claim.claim_number", read_only=True, default=None)

    class Meta:
        model = Payment
        fields = (
            "id",
            "client",
            "client_name",
            "policy",
            "policy_number",
            "claim",
            "claim_number",
            "amount",
            "payment_method",
            "payment_type",
            "status",
            "transaction_id",
            "mpesa_code",
            "payment_date",
            "due_date",
            "installment_number",
            "validated_at",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "claim", "validated_at", "created_at", "updated_at")
        extra_kwargs = {
            "client": {"required": False},
            "transaction_id": {"validators": []},
        }

    def validate_status(self, value):
        if value not in (Payment.Status.PENDING, Payment.Status.COMPLETED):
            raise serializers.ValidationError("New payments must be PENDING or COMPLETED.")
        return value

    def validate_payment_type(self, value):
        if value == Payment.Type.CLAIM_SETTLEMENT:
            raise serializers.ValidationError("Claim settlements must be recorded on the claim.")
        return value


class PaymentCompleteSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=100)
    mpesa_code = serializers.CharField(max_length=30, required=False, allow_blank=True)


class PaymentSearchSerializer(serializers.Serializer):
    client_id = serializers.IntegerField(required=False)
    policy_id = serializers.IntegerField(required=False)
    status = serializers.ChoiceField(choices=Payment.Status.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    min_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    max_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError({"end_date": "end_date must be on or after start_date."})
        low, high = attrs.get("min_amount"), attrs.get("max_amount")
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError({"max_amount": "max_amount must be >= min_amount."})
        return attrs
