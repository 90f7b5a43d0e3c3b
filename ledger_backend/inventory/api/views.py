# inventory/api/views.py

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response

from catalog.models import Product, Warehouse
from common.api import LEDGER_CLIENT_ERRORS, TenantAPIView, ledger_error_response
from common.tenancy import get_for_tenant
from inventory.api.filters import MovementFilter
from inventory.api.serializers import (
    ExpiringQuerySerializer,
    InboundCreateSerializer,
    MovementSerializer,
    OutboundCreateSerializer,
    StockQuerySerializer,
    TransferCreateSerializer,
)
from inventory.services.fifo import register_outbound
from inventory.services.intake import register_inbound
from inventory.services.queries import expiring_batches, movements_for_tenant, product_stock
from inventory.services.transfers import transfer_stock


class InboundView(TenantAPIView):
    serializer_class = InboundCreateSerializer

    @extend_schema(
        tags=["inventory"],
        request=InboundCreateSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = register_inbound(
                self.tenant,
                request.user,
                product=data["product_id"],
                warehouse=data["warehouse_id"],
                quantity=data["quantity"],
                unit_cost=data["unit_cost"],
                batch_number=data.get("batch_number") or None,
                expires_at=data.get("expires_at"),
                supplier=data.get("supplier_id"),
                notes=data.get("notes", ""),
                create_payable=data.get("create_payable", False),
                invoice_number=data.get("invoice_number") or None,
                payment_term_days=data.get("payment_term_days"),
                issue_date=data.get("issue_date"),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class OutboundView(TenantAPIView):
    serializer_class = OutboundCreateSerializer

    @extend_schema(
        tags=["inventory"],
        request=OutboundCreateSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = register_outbound(
                self.tenant,
                request.user,
                product=data["product_id"],
                warehouse=data["warehouse_id"],
                quantity=data["quantity"],
                reason=data["reason"],
                destination_type=data.get("destination_type") or None,
                destination_ref=data.get("destination_ref") or None,
                reference_id=data.get("reference_id") or None,
                notes=data.get("notes", ""),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class TransferView(TenantAPIView):
    serializer_class = TransferCreateSerializer

    @extend_schema(
        tags=["inventory"],
        request=TransferCreateSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            results = transfer_stock(
                self.tenant,
                request.user,
                origin=data["origin_warehouse_id"],
                destination=data["destination_warehouse_id"],
                lines=data["items"],
                notes=data.get("notes", ""),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response({"items": results}, status=status.HTTP_201_CREATED)


class StockView(TenantAPIView):
    @extend_schema(tags=["inventory"], parameters=[StockQuerySerializer], responses=OpenApiTypes.OBJECT)
    def get(self, request):
        s = StockQuerySerializer(data=request.query_params)
        s.is_valid(raise_exception=True)

        try:
            product = get_for_tenant(Product, self.tenant, s.validated_data["product_id"])
            warehouse = get_for_tenant(Warehouse, self.tenant, s.validated_data["warehouse_id"])
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(
            product_stock(self.tenant, product=product, warehouse=warehouse),
            status=status.HTTP_200_OK,
        )


class ExpiringBatchesView(TenantAPIView):
    @extend_schema(tags=["inventory"], parameters=[ExpiringQuerySerializer], responses=OpenApiTypes.OBJECT)
    def get(self, request):
        s = ExpiringQuerySerializer(data=request.query_params)
        s.is_valid(raise_exception=True)
        return Response(
            expiring_batches(self.tenant, days_ahead=s.validated_data.get("days_ahead")),
            status=status.HTTP_200_OK,
        )


class MovementListView(TenantAPIView):
    serializer_class = MovementSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = MovementFilter

    def get_queryset(self):
        return movements_for_tenant(self.tenant)

    @extend_schema(tags=["inventory"], responses=MovementSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)

        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)
