from __future__ import annotations

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import HasResourceRole
from common.persistence import DjangoStore
from insurance.api.serializers.product import IntermediarySerializer, ProductSerializer
from insurance.selectors.product_selector import list_intermediaries, list_products
from insurance.services.intermediary_service import IntermediaryService
from insurance.services.product_service import ProductService


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [HasResourceRole]
    resource_key = "products"
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def get_service(self) -> ProductService:
        return ProductService(store=DjangoStore())

    def get_queryset(self):
        params = self.request.query_params
        return list_products(
            category=params.get("category"),
            status=params.get("status"),
            available_only=params.get("available") in ("1", "true", "True"),
            search=params.get("q"),
        )

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user, data=serializer.validated_data, request=self.request
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            product=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):
        product = self.get_service().activate(
            actor=request.user, product=self.get_object(), request=request
        )
        return Response(ProductSerializer(product).data)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        product = self.get_service().deactivate(
            actor=request.user, product=self.get_object(), request=request
        )
        return Response(ProductSerializer(product).data)


class IntermediaryViewSet(viewsets.ModelViewSet):
    serializer_class = IntermediarySerializer
    permission_classes = [HasResourceRole]
    resource_key = "intermediaries"
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def get_service(self) -> IntermediaryService:
        return IntermediaryService(store=DjangoStore())

    def get_queryset(self):
        params = self.request.query_params
        return list_intermediaries(
            intermediary_type=params.get("type"),
            status=params.get("status"),
            search=params.get("q"),
        )

    def perform_create(self, serializer):
        serializer.instance = self.get_service().create(
            actor=self.request.user, data=serializer.validated_data, request=self.request
        )

    def perform_update(self, serializer):
        serializer.instance = self.get_service().update(
            actor=self.request.user,
            intermediary=self.get_object(),
            data=serializer.validated_data,
            request=self.request,
        )
