from django.contrib import admin

from clients.models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("id", "first_name", "last_name", "email", "phone", "status", "created_at")
    list_filter = ("status", "id_type", "country")
    search_fields = ("first_name", "last_name", "email", "phone", "id_number")
    ordering = ("last_name", "first_name")

    def get_queryset(self, request):
        return Client.all_objects.all()
