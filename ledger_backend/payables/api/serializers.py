# payables/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from payables.models import AccountPayable, PaymentRecord


class PaymentRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentRecord
        fields = (
            "id",
            "amount",
            "currency",
            "payment_method",
            "reference",
            "paid_at",
            "notes",
            "created_at",
        )
        read_only_fields = fields


class AccountPayableSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)
    order_number = serializers.CharField(
        source="purchase_order.order_number", read_only=True, default=None
    )
    payments = PaymentRecordSerializer(many=True, read_only=True)

    class Meta:
        model = AccountPayable
        fields = (
            "id",
            "supplier",
            "supplier_name",
            "purchase_order",
            "order_number",
            "invoice_number",
            "currency",
            "total_amount",
            "paid_amount",
            "balance_amount",
            "issue_date",
            "due_date",
            "status",
            "paid_at",
            "notes",
            "payments",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    payment_method = serializers.ChoiceField(choices=PaymentRecord.Method.choices)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    paid_at = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
