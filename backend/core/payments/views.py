from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import HasResourceRole
from accounts.rbac import FINANCE_ROLES
from common.persistence import DjangoStore
from payments.selectors import client_payment_summary, search_payments
from payments.serializers import (
    PaymentCompleteSerializer,
    PaymentSearchSerializer,
    PaymentSerializer,
)
from payments.services import PaymentService


class PaymentViewSet(viewsets.ModelViewSet):
    serializer_class = PaymentSerializer
    permission_classes = [HasResourceRole]
    resource_key = "payments"
    http_method_names = ["get", "post", "put", "patch", "head", "options"]
    action_roles = {
        "summary": FINANCE_ROLES,
        "complete": FINANCE_ROLES,
    }

    def get_service(self) -> PaymentService:
        return PaymentService(store=DjangoStore())

    def get_queryset(self):
        return search_payments(user=self.request.user)

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user, data=serializer.validated_data, request=self.request
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            payment=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )

    @action(detail=False, methods=["get"])
    def search(self, request):
        query = PaymentSearchSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        queryset = search_payments(user=request.user, **query.validated_data)
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(PaymentSerializer(page, many=True).data)
        return Response(PaymentSerializer(queryset, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"customer/(?P<client_id>\d+)")
    def customer(self, request, client_id=None):
        queryset = search_payments(user=request.user, client_id=client_id)
        return Response(PaymentSerializer(queryset, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"summary/(?P<client_id>\d+)")
    def summary(self, request, client_id=None):
        return Response(client_payment_summary(client_id))

    @action(detail=False, methods=["post"])
    def complete(self, request):
        serializer = PaymentCompleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        completed = self.get_service().mark_as_completed(
            transaction_id=serializer.validated_data["transaction_id"],
            mpesa_code=serializer.validated_data.get("mpesa_code") or None,
            actor=request.user,
            request=request,
        )
        return Response(
            {
                "transaction_id": serializer.validated_data["transaction_id"],
                "completed": completed,
            }
        )
