"""
======================================================
PATH: inventory/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Batch, Movement

Purpose:
- Batch holds stock (one row per received lot).
- Movement is the append-only ledger of every quantity change.
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Batch",
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
                (
                    "batch_number",
                    models.CharField(
                        max_length=128,
                        help_text="Lot reference (unique per tenant)",
                    ),
                ),
                (
                    "quantity_initial",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=3,
                        help_text="Quantity at creation (immutable)",
                    ),
                ),
                (
                    "quantity_current",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=3,
                        help_text="Remaining quantity (service-managed only)",
                    ),
                ),
                (
                    "unit_cost",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=4,
                        help_text="Unit cost of this lot (immutable)",
                    ),
                ),
                ("received_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("expires_at", models.DateField(null=True, blank=True)),
                ("is_exhausted", models.BooleanField(default=False)),
                ("metadata", models.JSONField(default=dict, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "tenant",
                    models.ForeignKey(
                        to="catalog.tenant",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="batches",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="catalog.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="batches",
                    ),
                ),
                (
                    "warehouse",
                    models.ForeignKey(
                        to="catalog.warehouse",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="batches",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        to="catalog.supplier",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="batches",
                    ),
                ),
            ],
            options={
                "ordering": ["received_at", "created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["tenant", "product", "warehouse", "is_exhausted"],
                        name="batch_fifo_lookup_idx",
                    ),
                    models.Index(fields=["tenant", "expires_at"], name="batch_tenant_expiry_idx"),
                    models.Index(fields=["received_at"], name="batch_received_at_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant", "batch_number"),
                        name="uniq_batch_number_per_tenant",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_initial__gt", 0)),
                        name="chk_batch_qty_initial_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_current__gte", 0)),
                        name="chk_batch_qty_current_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity_current__lte", models.F("quantity_initial"))),
                        name="chk_batch_current_lte_initial",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("unit_cost__gte", 0)),
                        name="chk_batch_unit_cost_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Movement",
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
                (
                    "movement_type",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("IN", "Stock In"),
                            ("OUT", "Stock Out"),
                            ("TRANSFER", "Transfer"),
                            ("AUDIT", "Audit Adjustment"),
                            ("SALE", "Sale"),
                            ("CONSUME", "Internal Consumption"),
                        ],
                    ),
                ),
                (
                    "direction",
                    models.CharField(
                        max_length=3,
                        choices=[("IN", "In"), ("OUT", "Out")],
                    ),
                ),
                ("quantity", models.DecimalField(max_digits=14, decimal_places=3)),
                ("stock_before", models.DecimalField(max_digits=14, decimal_places=3)),
                ("stock_after", models.DecimalField(max_digits=14, decimal_places=3)),
                ("unit_cost", models.DecimalField(max_digits=14, decimal_places=4)),
                ("total_cost", models.DecimalField(max_digits=18, decimal_places=4)),
                ("destination_type", models.CharField(max_length=50, blank=True, default="")),
                ("destination_ref", models.CharField(max_length=255, blank=True, default="")),
                (
                    "reference_type",
                    models.CharField(
                        max_length=20,
                        choices=[
                            ("PURCHASE_ORDER", "Purchase Order"),
                            ("MOVEMENT", "Movement"),
                            ("AUDIT", "Inventory Audit"),
                            ("SALE", "Sale"),
                            ("CONSUME", "Consumption"),
                            ("TRANSFER", "Transfer"),
                            ("ADJUSTMENT", "Adjustment"),
                            ("MANUAL", "Manual"),
                        ],
                        blank=True,
                        default="",
                    ),
                ),
                ("reference_id", models.CharField(max_length=64, blank=True, default="")),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "tenant",
                    models.ForeignKey(
                        to="catalog.tenant",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movements",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="catalog.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movements",
                    ),
                ),
                (
                    "batch",
                    models.ForeignKey(
                        to="inventory.batch",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movements",
                    ),
                ),
                (
                    "origin_warehouse",
                    models.ForeignKey(
                        to="catalog.warehouse",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="outgoing_movements",
                    ),
                ),
                (
                    "destination_warehouse",
                    models.ForeignKey(
                        to="catalog.warehouse",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incoming_movements",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        to=settings.AUTH_USER_MODEL,
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="inventory_movements",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["tenant", "created_at"], name="movement_tenant_created_idx"),
                    models.Index(fields=["tenant", "movement_type"], name="movement_tenant_type_idx"),
                    models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
                    models.Index(fields=["batch", "created_at"], name="movement_batch_created_idx"),
                    models.Index(fields=["reference_type", "reference_id"], name="movement_reference_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)),
                        name="chk_movement_quantity_gt_zero",
                    ),
                ],
            },
        ),
    ]
