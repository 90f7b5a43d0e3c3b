# inventory/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from inventory.models import Batch, Movement
from inventory.services.fifo import OutboundReason


class InboundCreateSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    warehouse_id = serializers.UUIDField()
    supplier_id = serializers.UUIDField(required=False, allow_null=True)

    quantity = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal("0.001"))
    unit_cost = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0)

    batch_number = serializers.CharField(max_length=128, required=False, allow_blank=True, allow_null=True)
    expires_at = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    create_payable = serializers.BooleanField(required=False, default=False)
    invoice_number = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    payment_term_days = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    issue_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs.get("create_payable") and not attrs.get("supplier_id"):
            raise serializers.ValidationError(
                {"supplier_id": "supplier_id is required when create_payable is true"}
            )
        return attrs


class OutboundCreateSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    warehouse_id = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal("0.001"))
    reason = serializers.ChoiceField(choices=OutboundReason.CHOICES)

    destination_type = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    destination_ref = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    reference_id = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class TransferLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal("0.001"))


class TransferCreateSerializer(serializers.Serializer):
    origin_warehouse_id = serializers.UUIDField()
    destination_warehouse_id = serializers.UUIDField()
    items = TransferLineSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class StockQuerySerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    warehouse_id = serializers.UUIDField()


class ExpiringQuerySerializer(serializers.Serializer):
    days_ahead = serializers.IntegerField(required=False, min_value=0, max_value=3650)


class BatchSerializer(serializers.ModelSerializer):
    class Meta:
        model = Batch
        fields = (
            "id",
            "batch_number",
            "product",
            "warehouse",
            "supplier",
            "quantity_initial",
            "quantity_current",
            "unit_cost",
            "received_at",
            "expires_at",
            "is_exhausted",
            "metadata",
            "created_at",
        )
        read_only_fields = fields


class MovementSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)
    batch_number = serializers.CharField(source="batch.batch_number", read_only=True)
    signed_quantity = serializers.DecimalField(max_digits=14, decimal_places=3, read_only=True)

    class Meta:
        model = Movement
        fields = (
            "id",
            "movement_type",
            "direction",
            "product",
            "product_name",
            "product_sku",
            "batch",
            "batch_number",
            "quantity",
            "signed_quantity",
            "stock_before",
            "stock_after",
            "unit_cost",
            "total_cost",
            "origin_warehouse",
            "destination_warehouse",
            "destination_type",
            "destination_ref",
            "reference_type",
            "reference_id",
            "performed_by",
            "notes",
            "created_at",
        )
        read_only_fields = fields
