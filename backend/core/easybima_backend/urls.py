from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def healthz(_request):
    return JsonResponse({"status": "ok"})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("healthz/", healthz, name="healthz"),
    path("api/healthz/", healthz, name="api-healthz"),
    path("api/ledger/", include("ledger.urls")),
    path("api/", include("accounts.urls")),
    path("api/", include("clients.urls")),
    path("api/", include("insurance.api.urls")),
    path("api/", include("payments.urls")),
    path("api/", include("commissions.urls")),
    path("api/", include("reminders.urls")),
]
