from django.contrib import admin

from reminders.models import Reminder


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "reminder_type", "trigger_days", "is_active", "completed_at")
    list_filter = ("reminder_type", "is_active")
    search_fields = ("product__name", "product__code")
