from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import HasResourceRole
from commissions.engine import calculate_commission
from commissions.serializers import (
    CommissionCalculateSerializer,
    CommissionDisputeSerializer,
    CommissionMarkPaidSerializer,
    CommissionProcessSerializer,
    CommissionSerializer,
)
from commissions.selectors import list_commissions
from commissions.services import CommissionService
from common.persistence import DjangoStore


class CommissionViewSet(viewsets.ModelViewSet):
    serializer_class = CommissionSerializer
    permission_classes = [HasResourceRole]
    resource_key = "commissions"
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def get_service(self) -> CommissionService:
        return CommissionService(store=DjangoStore())

    def get_queryset(self):
        params = self.request.query_params
        return list_commissions(
            status=params.get("status"),
            intermediary_id=params.get("intermediary_id"),
            period=params.get("period"),
        )

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user, data=serializer.validated_data, request=self.request
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            commission=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        commission = self.get_service().approve(
            actor=request.user, commission=self.get_object(), request=request
        )
        return Response(CommissionSerializer(commission).data)

    @action(detail=True, methods=["post"], url_path="mark-paid")
    def mark_paid(self, request, pk=None):
        serializer = CommissionMarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        commission = self.get_service().mark_as_paid(
            actor=request.user,
            commission=self.get_object(),
            payment_reference=serializer.validated_data["payment_reference"],
            payment_date=serializer.validated_data.get("payment_date"),
            request=request,
        )
        return Response(CommissionSerializer(commission).data)

    @action(detail=True, methods=["post"])
    def dispute(self, request, pk=None):
        serializer = CommissionDisputeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        commission = self.get_service().dispute(
            actor=request.user,
            commission=self.get_object(),
            notes=serializer.validated_data.get("notes", ""),
            request=request,
        )
        return Response(CommissionSerializer(commission).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        commission = self.get_service().cancel(
            actor=request.user, commission=self.get_object(), request=request
        )
        return Response(CommissionSerializer(commission).data)

    @action(detail=False, methods=["post"])
    def process(self, request):
        serializer = CommissionProcessSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        paid = self.get_service().process_batch(
            actor=request.user,
            commission_ids=serializer.validated_data["commission_ids"],
            payment_reference=serializer.validated_data["payment_reference"],
            payment_date=serializer.validated_data.get("payment_date"),
            request=request,
        )
        return Response(
            {"processed": len(paid), "commissions": CommissionSerializer(paid, many=True).data},
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["post"])
    def calculate(self, request):
        serializer = CommissionCalculateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        premium = serializer.validated_data["premium"]
        rate = serializer.validated_data["rate"]
        return Response(
            {"premium": premium, "rate": rate, "commission": calculate_commission(premium, rate)}
        )
