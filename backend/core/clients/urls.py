from rest_framework.routers import DefaultRouter

from clients.views import ClientViewSet

router = DefaultRouter()
router.register("clients", ClientViewSet, basename="clients")

urlpatterns = router.urls
