# purchases/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from purchases.models import PurchaseOrder, PurchaseOrderItem


class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)
    quantity_pending = serializers.DecimalField(max_digits=14, decimal_places=3, read_only=True)

    class Meta:
        model = PurchaseOrderItem
        fields = (
            "id",
            "product",
            "product_name",
            "product_sku",
            "quantity_ordered",
            "quantity_received",
            "quantity_pending",
            "unit_price",
            "discount",
            "tax_rate",
            "line_total",
            "notes",
        )
        read_only_fields = fields


class PurchaseOrderSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    items = PurchaseOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = (
            "id",
            "order_number",
            "supplier",
            "supplier_name",
            "status",
            "expected_at",
            "ordered_at",
            "received_at",
            "payment_term_days",
            "currency",
            "subtotal",
            "tax_amount",
            "total",
            "notes",
            "items",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PurchaseOrderCreateSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField()
    order_number = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    expected_at = serializers.DateField(required=False, allow_null=True)
    payment_term_days = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    currency = serializers.CharField(required=False, max_length=3, default="USD")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class PurchaseOrderItemCreateSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity_ordered = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal("0.001"))
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0)
    discount = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0, required=False, default=0)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=4, min_value=0, required=False, default=0)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class ReceiveLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=Decimal("0.001"))
    unit_cost = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0)
    batch_number = serializers.CharField(max_length=128, required=False, allow_blank=True, allow_null=True)
    expires_at = serializers.DateField(required=False, allow_null=True)


class ReceiveGoodsSerializer(serializers.Serializer):
    warehouse_id = serializers.UUIDField()
    items = ReceiveLineSerializer(many=True, allow_empty=False)
    invoice_number = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
