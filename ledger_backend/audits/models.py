# audits/models.py

"""
INVENTORY AUDITS (PHYSICAL COUNTS)

InventoryAudit snapshots the system stock of every active product at one
warehouse; counters record what they find; closing the audit posts AUDIT
movements for every non-zero variance.

Status flow:
    PENDING -> IN_PROGRESS (first count) -> COMPLETED (close)
    PENDING / IN_PROGRESS -> CANCELLED
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from catalog.models import Product, Tenant, Warehouse


class InventoryAudit(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        IN_PROGRESS = "IN_PROGRESS", "In Progress"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    OPEN_STATUSES = (Status.PENDING, Status.IN_PROGRESS)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="audits",
    )
    warehouse = models.ForeignKey(
        Warehouse,
        on_delete=models.PROTECT,
        related_name="audits",
    )

    code = models.CharField(max_length=64)
    name = models.CharField(max_length=200, blank=True, default="")

    scheduled_at = models.DateTimeField(null=True, blank=True)

    status = models.CharField(
        max_length=12, choices=Status.choices, default=Status.PENDING
    )

    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="closed_audits",
    )

    total_variance = models.DecimalField(
        max_digits=14, decimal_places=3, default=Decimal("0")
    )
    variance_cost = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0")
    )

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "code"],
                name="uniq_audit_code_per_tenant",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant", "status"], name="audit_tenant_status_idx"),
            models.Index(fields=["warehouse", "created_at"], name="audit_warehouse_created_idx"),
        ]

    @property
    def is_open(self) -> bool:
        return self.status in self.OPEN_STATUSES

    def clean(self):
        if self.warehouse_id and self.tenant_id and self.warehouse.tenant_id != self.tenant_id:
            raise ValidationError({"warehouse": "warehouse must belong to the audit tenant"})

        if self.status == self.Status.COMPLETED and not self.completed_at:
            raise ValidationError(
                {"completed_at": "completed_at is required when status is COMPLETED"}
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.code} ({self.status})"


class InventoryAuditItem(models.Model):
    """
    One product line of an audit.

    variance = counted_stock - system_stock (NULL until counted).
    unadjusted_quantity records a deficit the ledger could not absorb at close.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    audit = models.ForeignKey(
        InventoryAudit,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="audit_items",
    )

    system_stock = models.DecimalField(max_digits=14, decimal_places=3)
    counted_stock = models.DecimalField(
        max_digits=14, decimal_places=3, null=True, blank=True
    )
    variance = models.DecimalField(
        max_digits=14, decimal_places=3, null=True, blank=True
    )
    variance_cost = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0")
    )

    is_adjusted = models.BooleanField(default=False)
    unadjusted_quantity = models.DecimalField(
        max_digits=14, decimal_places=3, default=Decimal("0")
    )

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["product__name"]
        constraints = [
            models.UniqueConstraint(
                fields=["audit", "product"],
                name="uniq_audit_product",
            ),
        ]

    @property
    def is_counted(self) -> bool:
        return self.counted_stock is not None

    def clean(self):
        if self.counted_stock is not None and self.counted_stock < 0:
            raise ValidationError({"counted_stock": "counted_stock cannot be negative"})

        if self.counted_stock is not None and self.variance != self.counted_stock - self.system_stock:
            raise ValidationError({"variance": "variance must equal counted_stock - system_stock"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{self.audit_id} | {product_name}"
