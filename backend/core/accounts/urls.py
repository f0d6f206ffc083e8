from django.urls import include, path
from rest_framework.authtoken.views import obtain_auth_token
from rest_framework.routers import DefaultRouter

from accounts.views import (
    AuthenticatedUserAPIView,
    LogoutAPIView,
    RegisterAPIView,
    UserViewSet,
)

router = DefaultRouter()
router.register("users", UserViewSet, basename="users")

urlpatterns = [
    path("auth/token/", obtain_auth_token, name="auth-token"),
    path("auth/me/", AuthenticatedUserAPIView.as_view(), name="auth-me"),
    path("auth/register/", RegisterAPIView.as_view(), name="auth-register"),
    path("auth/logout/", LogoutAPIView.as_view(), name="auth-logout"),
    path("", include(router.urls)),
]
