from rest_framework import serializers

from reminders.models import Reminder


class ReminderSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = Reminder
        fields = (
            "id",
            "product",
            "product_name",
            "reminder_type",
            "trigger_days",
            "email_enabled",
            "sms_enabled",
            "email_subject",
            "email_template",
            "sms_template",
            "is_active",
            "completed_at",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "completed_at", "created_at", "updated_at")


class ReminderDispatchSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
