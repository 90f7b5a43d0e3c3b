# payables/api/views.py

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response

from common.api import LEDGER_CLIENT_ERRORS, TenantAPIView, ledger_error_response
from common.tenancy import get_for_tenant
from payables.api.serializers import AccountPayableSerializer, PaymentCreateSerializer
from payables.models import AccountPayable
from payables.services.payable_service import payables_summary, refresh_payable_statuses
from payables.services.payment_service import register_payment


def _payables_for(tenant):
    return (
        AccountPayable.objects.filter(tenant=tenant)
        .select_related("supplier", "purchase_order")
        .prefetch_related("payments")
    )


class PayableListView(TenantAPIView):
    serializer_class = AccountPayableSerializer

    @extend_schema(tags=["payables"], responses=AccountPayableSerializer(many=True))
    def get(self, request):
        qs = _payables_for(self.tenant)

        status_filter = request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        supplier_id = request.query_params.get("supplier")
        if supplier_id:
            qs = qs.filter(supplier_id=supplier_id)

        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)


class PayableDetailView(TenantAPIView):
    @extend_schema(tags=["payables"], responses=AccountPayableSerializer)
    def get(self, request, payable_id):
        try:
            payable = get_for_tenant(
                AccountPayable,
                self.tenant,
                payable_id,
                label="Account payable",
                queryset=_payables_for(self.tenant),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)
        return Response(AccountPayableSerializer(payable).data, status=status.HTTP_200_OK)


class PayablePaymentView(TenantAPIView):
    serializer_class = PaymentCreateSerializer

    @extend_schema(
        tags=["payables"],
        request=PaymentCreateSerializer,
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request, payable_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = register_payment(
                self.tenant,
                payable_id,
                amount=data["amount"],
                payment_method=data["payment_method"],
                reference=data.get("reference", ""),
                paid_at=data.get("paid_at"),
                notes=data.get("notes", ""),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(result, status=status.HTTP_201_CREATED)


class PayableSummaryView(TenantAPIView):
    @extend_schema(tags=["payables"], responses=OpenApiTypes.OBJECT)
    def get(self, request):
        return Response(payables_summary(self.tenant), status=status.HTTP_200_OK)


class PayableRefreshStatusView(TenantAPIView):
    @extend_schema(tags=["payables"], request=None, responses=OpenApiTypes.OBJECT)
    def post(self, request):
        return Response(refresh_payable_statuses(self.tenant), status=status.HTTP_200_OK)
