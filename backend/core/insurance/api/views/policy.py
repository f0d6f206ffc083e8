from __future__ import annotations

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import HasResourceRole
from common.persistence import DjangoStore
from insurance.api.serializers.policy import (
    PolicyCancelSerializer,
    PolicySerializer,
    PolicyTransitionSerializer,
)
from insurance.selectors.policy_selector import list_policies
from insurance.services.policy_service import PolicyService


class PolicyViewSet(viewsets.ModelViewSet):
    serializer_class = PolicySerializer
    permission_classes = [HasResourceRole]
    resource_key = "policies"
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def get_service(self) -> PolicyService:
        return PolicyService(store=DjangoStore())

    def get_queryset(self):
        params = self.request.query_params
        return list_policies(
            user=self.request.user,
            status=params.get("status"),
            scope=params.get("scope"),
            client_id=params.get("client_id"),
            product_id=params.get("product_id"),
            search=params.get("q"),
        )

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user, data=serializer.validated_data, request=self.request
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            policy=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        serializer = PolicyCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        policy = self.get_service().cancel(
            actor=request.user,
            policy=self.get_object(),
            reason=serializer.validated_data.get("reason", ""),
            cancellation_date=serializer.validated_data.get("cancellation_date"),
            request=request,
        )
        return Response(PolicySerializer(policy).data)

    @action(detail=True, methods=["post"])
    def transition(self, request, pk=None):
        serializer = PolicyTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        policy = self.get_service().transition(
            actor=request.user,
            policy=self.get_object(),
            to_status=serializer.validated_data["status"],
            cancellation_reason=serializer.validated_data.get("reason", ""),
            cancellation_date=serializer.validated_data.get("cancellation_date"),
            request=request,
        )
        return Response(PolicySerializer(policy).data)

    @action(detail=True, methods=["get"])
    def balance(self, request, pk=None):
        return Response(self.get_service().balance(self.get_object()))

    @action(detail=True, methods=["get"])
    def installments(self, request, pk=None):
        return Response(self.get_service().installments(self.get_object()))
