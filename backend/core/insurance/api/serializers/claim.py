from __future__ import annotations

from rest_framework import serializers

from insurance.models import Claim, Policy
from payments.models import Payment


class ClaimSerializer(serializers.ModelSerializer):
    policy_number = serializers.CharField(source="policy.policy_number", read_only=True)
    client_name = serializers.CharField(source="client.full_name", read_only=True)
    outstanding_amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Claim
        fields = (
            "id",
            "claim_number",
            "policy",
            "policy_number",
            "client",
            "client_name",
            "date_of_loss",
            "date_reported",
            "description",
            "location",
            "estimated_amount",
            "approved_amount",
            "paid_amount",
            "outstanding_amount",
            "status",
            "rejection_reason",
            "assigned_to",
            "date_assigned",
            "date_completed",
            "police_report_number",
            "is_police_report",
            "metadata",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "claim_number",
            "approved_amount",
            "paid_amount",
            "status",
            "rejection_reason",
            "assigned_to",
            "date_assigned",
            "date_completed",
            "created_at",
            "updated_at",
        )
        extra_kwargs = {"client": {"required": False}}

    def validate_policy(self, policy: Policy) -> Policy:
        request = self.context.get("request")
        user = getattr(request, "user", None)
        if getattr(user, "role", "") == "client" and not user.is_superuser:
            if policy.client.user_id != user.pk:
                raise serializers.ValidationError("Policy not found.")
        return policy


class ClaimApproveSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True, min_value=0
    )


class ClaimRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True)


class ClaimPaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    payment_method = serializers.ChoiceField(
        choices=Payment.Method.choices, default=Payment.Method.BANK_TRANSFER
    )
    transaction_id = serializers.CharField(required=False, allow_blank=True, max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True)


class ClaimStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Claim.Status.choices)
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    reason = serializers.CharField(required=False, allow_blank=True)
