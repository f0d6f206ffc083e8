from rest_framework import status, viewsets
from rest_framework.response import Response

from accounts.permissions import HasResourceRole
from clients.models import Client
from clients.selectors import list_clients
from clients.serializers import ClientSerializer
from clients.services import ClientService
from common.persistence import DjangoStore


class ClientViewSet(viewsets.ModelViewSet):
    serializer_class = ClientSerializer
    permission_classes = [HasResourceRole]
    resource_key = "clients"

    def get_service(self) -> ClientService:
        return ClientService(store=DjangoStore())

    def get_queryset(self):
        status_filter = (self.request.query_params.get("status") or "").strip().lower()
        if status_filter and status_filter not in Client.Status.values:
            return Client.objects.none()
        return list_clients(
            user=self.request.user,
            search=self.request.query_params.get("q") or "",
            status=status_filter,
        )

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user,
            data=serializer.validated_data,
            request=self.request,
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            client=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )

    def destroy(self, request, *args, **kwargs):
        self.get_service().delete(actor=request.user, client=self.get_object(), request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)
