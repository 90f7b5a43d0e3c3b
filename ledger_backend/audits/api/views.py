# audits/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response

from audits.api.serializers import (
    AuditCreateSerializer,
    AuditItemCountSerializer,
    AuditQuerySerializer,
    InventoryAuditItemSerializer,
    InventoryAuditListSerializer,
    InventoryAuditSerializer,
)
from audits.models import InventoryAudit
from audits.services.audit_service import (
    cancel_audit,
    close_audit,
    create_audit,
    get_audit,
    list_audits,
    update_audit_item,
)
from common.api import LEDGER_CLIENT_ERRORS, TenantAPIView, ledger_error_response


def _audit_payload(audit) -> dict:
    audit = (
        InventoryAudit.objects.select_related("warehouse")
        .prefetch_related("items", "items__product")
        .get(id=audit.id)
    )
    return InventoryAuditSerializer(audit).data


class AuditListCreateView(TenantAPIView):
    serializer_class = AuditCreateSerializer

    @extend_schema(
        tags=["audits"],
        parameters=[AuditQuerySerializer],
        responses=InventoryAuditListSerializer(many=True),
    )
    def get(self, request):
        q = AuditQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        qs = list_audits(
            self.tenant,
            warehouse=q.validated_data.get("warehouse"),
            status=q.validated_data.get("status"),
        )
        return Response(
            InventoryAuditListSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["audits"],
        request=AuditCreateSerializer,
        responses={201: InventoryAuditSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            audit = create_audit(
                self.tenant,
                warehouse=data["warehouse_id"],
                name=data.get("name", ""),
                scheduled_at=data.get("scheduled_at"),
                notes=data.get("notes", ""),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(_audit_payload(audit), status=status.HTTP_201_CREATED)


class AuditDetailView(TenantAPIView):
    @extend_schema(tags=["audits"], responses=InventoryAuditSerializer)
    def get(self, request, audit_id):
        try:
            audit = get_audit(self.tenant, audit_id)
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)
        return Response(_audit_payload(audit), status=status.HTTP_200_OK)


class AuditItemCountView(TenantAPIView):
    serializer_class = AuditItemCountSerializer

    @extend_schema(
        tags=["audits"],
        request=AuditItemCountSerializer,
        responses=InventoryAuditItemSerializer,
    )
    def patch(self, request, audit_id, item_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            item = update_audit_item(
                self.tenant,
                audit_id,
                item_id,
                counted_quantity=data["counted_quantity"],
                notes=data.get("notes"),
            )
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)

        return Response(InventoryAuditItemSerializer(item).data, status=status.HTTP_200_OK)


class AuditCloseView(TenantAPIView):
    @extend_schema(tags=["audits"], request=None, responses=InventoryAuditSerializer)
    def post(self, request, audit_id):
        try:
            audit = close_audit(self.tenant, audit_id, request.user)
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)
        return Response(_audit_payload(audit), status=status.HTTP_200_OK)


class AuditCancelView(TenantAPIView):
    @extend_schema(tags=["audits"], request=None, responses=InventoryAuditSerializer)
    def post(self, request, audit_id):
        try:
            audit = cancel_audit(self.tenant, audit_id)
        except LEDGER_CLIENT_ERRORS as exc:
            return ledger_error_response(exc)
        return Response(_audit_payload(audit), status=status.HTTP_200_OK)
