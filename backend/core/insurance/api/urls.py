from django.urls import include, path
from rest_framework.routers import DefaultRouter

from insurance.api.views.claim import ClaimViewSet
from insurance.api.views.policy import PolicyViewSet
from insurance.api.views.product import IntermediaryViewSet, ProductViewSet
from insurance.api.views.quote import QuoteViewSet

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")
router.register(r"intermediaries", IntermediaryViewSet, basename="intermediary")
router.register(r"quotes", QuoteViewSet, basename="quote")
router.register(r"policies", PolicyViewSet, basename="policy")
router.register(r"claims", ClaimViewSet, basename="claim")

urlpatterns = [
    path("", include(router.urls)),
]
