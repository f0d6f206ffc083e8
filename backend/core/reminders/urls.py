from django.urls import include, path
from rest_framework.routers import DefaultRouter

from reminders.views import ReminderViewSet

router = DefaultRouter()
router.register(r"reminders", ReminderViewSet, basename="reminder")

urlpatterns = [
    path("", include(router.urls)),
]
