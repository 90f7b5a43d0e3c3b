"""
======================================================
PATH: purchases/migrations/0001_initial.py
======================================================
MIGRATION: CREATE PurchaseOrder, PurchaseOrderItem
"""

from __future__ import annotations

import decimal
import uuid

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PurchaseOrder",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("order_number", models.CharField(max_length=64)),
                (
                    "status",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("DRAFT", "Draft"),
                            ("ORDERED", "Ordered"),
                            ("PARTIAL", "Partially Received"),
                            ("RECEIVED", "Received"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="DRAFT",
                    ),
                ),
                ("expected_at", models.DateField(null=True, blank=True)),
                ("ordered_at", models.DateTimeField(null=True, blank=True)),
                ("received_at", models.DateTimeField(null=True, blank=True)),
                ("payment_term_days", models.PositiveIntegerField(null=True, blank=True)),
                ("currency", models.CharField(max_length=3, default="USD")),
                (
                    "subtotal",
                    models.DecimalField(max_digits=14, decimal_places=2, default=decimal.Decimal("0.00")),
                ),
                (
                    "tax_amount",
                    models.DecimalField(max_digits=14, decimal_places=2, default=decimal.Decimal("0.00")),
                ),
                (
                    "total",
                    models.DecimalField(max_digits=14, decimal_places=2, default=decimal.Decimal("0.00")),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tenant",
                    models.ForeignKey(
                        to="catalog.tenant",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_orders",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        to="catalog.supplier",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_orders",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "status"], name="po_tenant_status_idx"),
                    models.Index(fields=["supplier", "created_at"], name="po_supplier_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant", "order_number"),
                        name="uniq_order_number_per_tenant",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("subtotal__gte", decimal.Decimal("0.00"))),
                        name="purchase_order_subtotal_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total__gte", decimal.Decimal("0.00"))),
                        name="purchase_order_total_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PurchaseOrderItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("quantity_ordered", models.DecimalField(max_digits=14, decimal_places=3)),
                (
                    "quantity_received",
                    models.DecimalField(max_digits=14, decimal_places=3, default=decimal.Decimal("0")),
                ),
                ("unit_price", models.DecimalField(max_digits=14, decimal_places=4)),
                (
                    "discount",
                    models.DecimalField(max_digits=14, decimal_places=4, default=decimal.Decimal("0")),
                ),
                (
                    "tax_rate",
                    models.DecimalField(max_digits=5, decimal_places=4, default=decimal.Decimal("0")),
                ),
                (
                    "line_total",
                    models.DecimalField(max_digits=14, decimal_places=2, default=decimal.Decimal("0.00")),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        to="purchases.purchaseorder",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="catalog.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchase_order_items",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("order", "product"),
                        name="uniq_order_product",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_ordered__gt", 0)),
                        name="purchase_order_item_quantity_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_received__gte", 0)),
                        name="purchase_order_item_received_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("unit_price__gte", decimal.Decimal("0"))),
                        name="purchase_order_item_unit_price_nonnegative",
                    ),
                ],
            },
        ),
    ]
