# audits/api/serializers.py

from rest_framework import serializers

from audits.models import InventoryAudit, InventoryAuditItem


class InventoryAuditItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)

    class Meta:
        model = InventoryAuditItem
        fields = (
            "id",
            "product",
            "product_name",
            "product_sku",
            "system_stock",
            "counted_stock",
            "variance",
            "variance_cost",
            "is_adjusted",
            "unadjusted_quantity",
            "notes",
            "updated_at",
        )
        read_only_fields = fields


class InventoryAuditSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source="warehouse.name", read_only=True)
    items = InventoryAuditItemSerializer(many=True, read_only=True)

    class Meta:
        model = InventoryAudit
        fields = (
            "id",
            "code",
            "name",
            "warehouse",
            "warehouse_name",
            "status",
            "scheduled_at",
            "started_at",
            "completed_at",
            "cancelled_at",
            "closed_by",
            "total_variance",
            "variance_cost",
            "notes",
            "items",
            "created_at",
        )
        read_only_fields = fields


class InventoryAuditListSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source="warehouse.name", read_only=True)

    class Meta:
        model = InventoryAudit
        fields = (
            "id",
            "code",
            "name",
            "warehouse",
            "warehouse_name",
            "status",
            "scheduled_at",
            "completed_at",
            "total_variance",
            "variance_cost",
            "created_at",
        )
        read_only_fields = fields


class AuditCreateSerializer(serializers.Serializer):
    warehouse_id = serializers.UUIDField()
    name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    scheduled_at = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class AuditItemCountSerializer(serializers.Serializer):
    counted_quantity = serializers.DecimalField(max_digits=14, decimal_places=3, min_value=0)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AuditQuerySerializer(serializers.Serializer):
    warehouse = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=InventoryAudit.Status.choices, required=False)
