from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import HasResourceRole
from accounts.rbac import CLAIMS_ROLES, FINANCE_ROLES
from common.persistence import DjangoStore
from insurance.api.serializers.claim import (
    ClaimApproveSerializer,
    ClaimPaymentSerializer,
    ClaimRejectSerializer,
    ClaimSerializer,
    ClaimStatusSerializer,
)
from insurance.selectors.claim_selector import list_claims
from insurance.services.claim_service import ClaimService
from payments.serializers import PaymentSerializer


class ClaimViewSet(viewsets.ModelViewSet):
    serializer_class = ClaimSerializer
    permission_classes = [HasResourceRole]
    resource_key = "claims"
    http_method_names = ["get", "post", "put", "patch", "head", "options"]
    # Decisions belong to the claims desk; clients may only file and submit.
    action_roles = {
        "review": CLAIMS_ROLES,
        "approve": CLAIMS_ROLES,
        "reject": CLAIMS_ROLES,
        "close": CLAIMS_ROLES,
        "change_status": CLAIMS_ROLES,
        "payments": CLAIMS_ROLES | FINANCE_ROLES,
    }

    def get_service(self) -> ClaimService:
        return ClaimService(store=DjangoStore())

    def get_queryset(self):
        params = self.request.query_params
        return list_claims(
            user=self.request.user,
            status=params.get("status"),
            policy_id=params.get("policy_id"),
            only_open=params.get("open") in ("1", "true", "True"),
            assigned_to_me=params.get("mine") in ("1", "true", "True"),
        )

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user, data=serializer.validated_data, request=self.request
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            claim=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )

    @action(detail=True, methods=["post"])
    def submit(self, request, pk=None):
        claim = self.get_service().submit(actor=request.user, claim=self.get_object(), request=request)
        return Response(ClaimSerializer(claim).data)

    @action(detail=True, methods=["post"])
    def review(self, request, pk=None):
        claim = self.get_service().review(actor=request.user, claim=self.get_object(), request=request)
        return Response(ClaimSerializer(claim).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        serializer = ClaimApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        claim = self.get_service().approve(
            actor=request.user,
            claim=self.get_object(),
            amount=serializer.validated_data.get("amount"),
            request=request,
        )
        return Response(ClaimSerializer(claim).data)

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        serializer = ClaimRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        claim = self.get_service().reject(
            actor=request.user,
            claim=self.get_object(),
            reason=serializer.validated_data["reason"],
            request=request,
        )
        return Response(ClaimSerializer(claim).data)

    @action(detail=True, methods=["post"])
    def payments(self, request, pk=None):
        serializer = ClaimPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        recorded = self.get_service().record_payment(
            actor=request.user,
            claim=self.get_object(),
            request=request,
            **serializer.validated_data,
        )
        return Response(
            {
                "claim": ClaimSerializer(recorded.claim).data,
                "payment": PaymentSerializer(recorded.payment).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"])
    def close(self, request, pk=None):
        claim = self.get_service().close(actor=request.user, claim=self.get_object(), request=request)
        return Response(ClaimSerializer(claim).data)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        serializer = ClaimStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        claim = self.get_service().change_status(
            actor=request.user,
            claim=self.get_object(),
            status=data["status"],
            amount=data.get("amount"),
            reason=data.get("reason", ""),
            request=request,
        )
        return Response(ClaimSerializer(claim).data)
