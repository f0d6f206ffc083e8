from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import HasResourceRole
from common.persistence import DjangoStore
from insurance.api.serializers.policy import PolicySerializer
from insurance.api.serializers.quote import (
    QuoteConvertSerializer,
    QuoteDeclineSerializer,
    QuoteSerializer,
    QuoteStatsQuerySerializer,
)
from insurance.selectors.quote_selector import list_quotes, quote_statistics, resolve_date_range
from insurance.services.quote_service import QuoteService


class QuoteViewSet(viewsets.ModelViewSet):
    serializer_class = QuoteSerializer
    permission_classes = [HasResourceRole]
    resource_key = "quotes"
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def get_service(self) -> QuoteService:
        return QuoteService(store=DjangoStore())

    def get_queryset(self):
        params = self.request.query_params
        return list_quotes(
            user=self.request.user,
            status=params.get("status"),
            client_id=params.get("client_id"),
        )

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user, data=serializer.validated_data, request=self.request
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            quote=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )

    @action(detail=False, methods=["get"])
    def stats(self, request):
        query = QuoteStatsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        window = resolve_date_range(
            range_name=query.validated_data.get("range"),
            start_date=query.validated_data.get("start_date"),
            end_date=query.validated_data.get("end_date"),
        )
        queryset = list_quotes(user=request.user, window=window)
        payload = quote_statistics(queryset)
        if window is not None:
            payload["period"] = {"start": window[0], "end": window[1]}
        return Response(payload)

    @action(detail=True, methods=["post"])
    def submit(self, request, pk=None):
        quote = self.get_service().submit(actor=request.user, quote=self.get_object(), request=request)
        return Response(QuoteSerializer(quote).data)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        quote = self.get_service().approve(
            actor=request.user, quote=self.get_object(), request=request
        )
        return Response(QuoteSerializer(quote).data)

    @action(detail=True, methods=["post"])
    def decline(self, request, pk=None):
        serializer = QuoteDeclineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        quote = self.get_service().decline(
            actor=request.user,
            quote=self.get_object(),
            reason=serializer.validated_data["reason"],
            request=request,
        )
        return Response(QuoteSerializer(quote).data)

    @action(detail=True, methods=["post"])
    def convert(self, request, pk=None):
        serializer = QuoteConvertSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        policy = self.get_service().convert_to_policy(
            actor=request.user,
            quote=self.get_object(),
            request=request,
            policy_data=serializer.validated_data,
        )
        return Response(PolicySerializer(policy).data, status=status.HTTP_201_CREATED)
