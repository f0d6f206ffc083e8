from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import HasResourceRole
from accounts.rbac import ADMIN_ROLES
from common.persistence import DjangoStore
from reminders.models import Reminder
from reminders.serializers import ReminderDispatchSerializer, ReminderSerializer
from reminders.services import ReminderService


class ReminderViewSet(viewsets.ModelViewSet):
    serializer_class = ReminderSerializer
    permission_classes = [HasResourceRole]
    resource_key = "reminders"
    action_roles = {"dispatch_due": ADMIN_ROLES}

    def get_service(self) -> ReminderService:
        return ReminderService(store=DjangoStore())

    def get_queryset(self):
        queryset = Reminder.objects.select_related("product")
        params = self.request.query_params
        if params.get("product_id"):
            queryset = queryset.filter(product_id=params["product_id"])
        if params.get("type"):
            queryset = queryset.filter(reminder_type=params["type"])
        if params.get("active") in ("1", "true", "True"):
            queryset = queryset.filter(is_active=True)
        return queryset

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user, data=serializer.validated_data, request=self.request
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            reminder=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )

    def destroy(self, request, *args, **kwargs):
        self.get_service().delete(actor=request.user, reminder=self.get_object(), request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch", "post"], url_path="mark-complete")
    def mark_complete(self, request, pk=None):
        reminder = self.get_service().mark_complete(
            actor=request.user, reminder=self.get_object(), request=request
        )
        return Response(ReminderSerializer(reminder).data)

    # Named so it does not shadow APIView.dispatch.
    @action(detail=False, methods=["post"], url_path="dispatch")
    def dispatch_due(self, request):
        serializer = ReminderDispatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().dispatch_due_reminders(serializer.validated_data.get("date"))
        return Response(result)
