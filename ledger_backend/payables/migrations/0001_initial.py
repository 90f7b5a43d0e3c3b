"""
======================================================
PATH: payables/migrations/0001_initial.py
======================================================
MIGRATION: CREATE AccountPayable, PaymentRecord
"""

from __future__ import annotations

import decimal
import uuid

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("purchases", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AccountPayable",
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
                ("invoice_number", models.CharField(max_length=64, blank=True, default="")),
                ("currency", models.CharField(max_length=3, default="USD")),
                ("total_amount", models.DecimalField(max_digits=14, decimal_places=2)),
                (
                    "paid_amount",
                    models.DecimalField(max_digits=14, decimal_places=2, default=decimal.Decimal("0.00")),
                ),
                ("balance_amount", models.DecimalField(max_digits=14, decimal_places=2)),
                ("issue_date", models.DateField(default=django.utils.timezone.localdate)),
                ("due_date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("CURRENT", "Current"),
                            ("DUE_SOON", "Due Soon"),
                            ("OVERDUE", "Overdue"),
                            ("PAID", "Paid"),
                        ],
                        default="CURRENT",
                    ),
                ),
                ("paid_at", models.DateTimeField(null=True, blank=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "tenant",
                    models.ForeignKey(
                        to="catalog.tenant",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payables",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        to="catalog.supplier",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payables",
                    ),
                ),
                (
                    "purchase_order",
                    models.ForeignKey(
                        to="purchases.purchaseorder",
                        null=True,
                        blank=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payables",
                    ),
                ),
            ],
            options={
                "ordering": ["due_date", "created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "status"], name="payable_tenant_status_idx"),
                    models.Index(fields=["tenant", "due_date"], name="payable_tenant_due_idx"),
                    models.Index(fields=["supplier", "created_at"], name="payable_supplier_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("total_amount__gte", decimal.Decimal("0.00"))),
                        name="payable_total_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("paid_amount__gte", decimal.Decimal("0.00"))),
                        name="payable_paid_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("balance_amount__gte", decimal.Decimal("0.00"))),
                        name="payable_balance_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentRecord",
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
                ("amount", models.DecimalField(max_digits=14, decimal_places=2)),
                ("currency", models.CharField(max_length=3, default="USD")),
                (
                    "payment_method",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("CASH", "Cash"),
                            ("BANK", "Bank Deposit"),
                            ("TRANSFER", "Transfer"),
                            ("CARD", "Card"),
                            ("CHECK", "Check"),
                            ("OTHER", "Other"),
                        ],
                    ),
                ),
                ("reference", models.CharField(max_length=100, blank=True, default="")),
                ("paid_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "payable",
                    models.ForeignKey(
                        to="payables.accountpayable",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                    ),
                ),
            ],
            options={
                "ordering": ["-paid_at", "-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", decimal.Decimal("0.00"))),
                        name="payment_amount_gt_zero",
                    ),
                ],
            },
        ),
    ]
