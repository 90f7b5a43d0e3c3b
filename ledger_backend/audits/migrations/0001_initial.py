"""
======================================================
PATH: audits/migrations/0001_initial.py
======================================================
MIGRATION: CREATE InventoryAudit, InventoryAuditItem
"""

from __future__ import annotations

import decimal
import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="InventoryAudit",
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
                ("code", models.CharField(max_length=64)),
                ("name", models.CharField(max_length=200, blank=True, default="")),
                ("scheduled_at", models.DateTimeField(null=True, blank=True)),
                (
                    "status",
                    models.CharField(
                        max_length=12,
                        choices=[
                            ("PENDING", "Pending"),
                            ("IN_PROGRESS", "In Progress"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        default="PENDING",
                    ),
                ),
                ("started_at", models.DateTimeField(null=True, blank=True)),
                ("completed_at", models.DateTimeField(null=True, blank=True)),
                ("cancelled_at", models.DateTimeField(null=True, blank=True)),
                (
                    "total_variance",
                    models.DecimalField(max_digits=14, decimal_places=3, default=decimal.Decimal("0")),
                ),
                (
                    "variance_cost",
                    models.DecimalField(max_digits=18, decimal_places=4, default=decimal.Decimal("0")),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tenant",
                    models.ForeignKey(
                        to="catalog.tenant",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="audits",
                    ),
                ),
                (
                    "warehouse",
                    models.ForeignKey(
                        to="catalog.warehouse",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="audits",
                    ),
                ),
                (
                    "closed_by",
                    models.ForeignKey(
                        to=settings.AUTH_USER_MODEL,
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="closed_audits",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "status"], name="audit_tenant_status_idx"),
                    models.Index(fields=["warehouse", "created_at"], name="audit_warehouse_created_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant", "code"),
                        name="uniq_audit_code_per_tenant",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InventoryAuditItem",
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
                ("system_stock", models.DecimalField(max_digits=14, decimal_places=3)),
                (
                    "counted_stock",
                    models.DecimalField(max_digits=14, decimal_places=3, null=True, blank=True),
                ),
                (
                    "variance",
                    models.DecimalField(max_digits=14, decimal_places=3, null=True, blank=True),
                ),
                (
                    "variance_cost",
                    models.DecimalField(max_digits=18, decimal_places=4, default=decimal.Decimal("0")),
                ),
                ("is_adjusted", models.BooleanField(default=False)),
                (
                    "unadjusted_quantity",
                    models.DecimalField(max_digits=14, decimal_places=3, default=decimal.Decimal("0")),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "audit",
                    models.ForeignKey(
                        to="audits.inventoryaudit",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        to="catalog.product",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="audit_items",
                    ),
                ),
            ],
            options={
                "ordering": ["product__name"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("audit", "product"),
                        name="uniq_audit_product",
                    ),
                ],
            },
        ),
    ]
