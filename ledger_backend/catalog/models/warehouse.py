# catalog/models/warehouse.py

import uuid

from django.db import models
from django.db.models import Q

from .tenant import Tenant


class Warehouse(models.Model):
    """
    A physical stock location owned by one tenant.

    Guarantees:
    - Warehouses are stable master-data
    - code is optional, but if provided it must be unique within the tenant
    - Batches and movements reference warehouses, never embed their data
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="warehouses",
    )

    name = models.CharField(max_length=255)

    # Optional, but if provided must be unique per tenant
    code = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Warehouse code (optional). If set, must be unique within the tenant.",
        db_index=True,
    )

    address = models.TextField(blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "code"],
                condition=Q(code__isnull=False) & ~Q(code=""),
                name="uniq_warehouse_code_per_tenant",
            ),
        ]

    def __str__(self):
        c = (self.code or "").strip()
        if c:
            return f"{self.name} ({c})"
        return self.name
