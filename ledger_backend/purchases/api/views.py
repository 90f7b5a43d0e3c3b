# purchases/api/views.py

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response

from common.api import LEDGER_CLIENT_ERRORS, TenantAPIView, ledger_error_response
from purchases.api.serializers import (
    PurchaseOrderCreateSerializer,
    PurchaseOrderItemCreateSerializer,
    PurchaseOrderItemSerializer,
    PurchaseOrderSerializer,
    ReceiveGoodsSerializer,
)
from purchases.models import PurchaseOrder
from purchases.services.order_service import (
    add_order_item,
    cancel_purchase_order,
    create_purchase_order,
    get_order,
    remove_order_item,
    send_purchase_order,
)
from purchases.services.receiving_service import receive_goods


def _order_payload(order) -> dict:
    order = (
        PurchaseOrder.objects.select_related("supplier")
        .prefetch_related("items", "items__product")
        .get(id=order.id)
    )
    return PurchaseOrderSerializer(order).data


class PurchaseOrderListCreateView(TenantAPIView):
    serializer_class = PurchaseOrderCreateSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseOrderSerializer(many=True))
    def get(self, request):
        qs = (
            PurchaseOrder.objects.filter(tenant=self.tenant)
            .select_related("supplier")
            .prefetch_related("items", "items__product")
            .order_by("-created_at")
        )
        status_filter = request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return Response(
            PurchaseOrderSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["purchases"],
        request=PurchaseOrderCreateSerializer,
        responses={201: PurchaseOrderSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = create_purchase_order(
                self.tenant,
                supplier=data["supplier_id"],
                order_number=data.get("order_number") or None,
                expected_at=data.get("expected_at"),
                payment_term_days=data.get("payment_term_days"),
                currency=data.get("currency") or "USD",
                notes=data.get("notes", ""),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(_order_payload(order), status=status.HTTP_201_CREATED)


class PurchaseOrderDetailView(TenantAPIView):
    @extend_schema(tags=["purchases"], responses=PurchaseOrderSerializer)
    def get(self, request, order_id):
        try:
            order = get_order(self.tenant, order_id)
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)
        return Response(_order_payload(order), status=status.HTTP_200_OK)


class PurchaseOrderItemCreateView(TenantAPIView):
    serializer_class = PurchaseOrderItemCreateSerializer

    @extend_schema(
        tags=["purchases"],
        request=PurchaseOrderItemCreateSerializer,
        responses={201: PurchaseOrderItemSerializer},
    )
    def post(self, request, order_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            item = add_order_item(
                self.tenant,
                order_id,
                product=data["product_id"],
                quantity_ordered=data["quantity_ordered"],
                unit_price=data["unit_price"],
                discount=data.get("discount"),
                tax_rate=data.get("tax_rate"),
                notes=data.get("notes", ""),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(
            PurchaseOrderItemSerializer(item).data, status=status.HTTP_201_CREATED
        )


class PurchaseOrderItemDeleteView(TenantAPIView):
    @extend_schema(tags=["purchases"], responses={204: None})
    def delete(self, request, order_id, item_id):
        try:
            remove_order_item(self.tenant, order_id, item_id)
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SendPurchaseOrderView(TenantAPIView):
    @extend_schema(tags=["purchases"], request=None, responses=PurchaseOrderSerializer)
    def post(self, request, order_id):
        try:
            order = send_purchase_order(self.tenant, order_id)
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)
        return Response(_order_payload(order), status=status.HTTP_200_OK)


class CancelPurchaseOrderView(TenantAPIView):
    @extend_schema(tags=["purchases"], request=None, responses=PurchaseOrderSerializer)
    def post(self, request, order_id):
        try:
            order = cancel_purchase_order(self.tenant, order_id)
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)
        return Response(_order_payload(order), status=status.HTTP_200_OK)


class ReceiveGoodsView(TenantAPIView):
    serializer_class = ReceiveGoodsSerializer

    @extend_schema(
        tags=["purchases"],
        request=ReceiveGoodsSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request, order_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = receive_goods(
                self.tenant,
                request.user,
                order_id,
                warehouse=data["warehouse_id"],
                lines=data["items"],
                invoice_number=data.get("invoice_number") or None,
                notes=data.get("notes", ""),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)
