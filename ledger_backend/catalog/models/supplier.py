# catalog/models/supplier.py

import uuid

from django.db import models

from .tenant import Tenant


class Supplier(models.Model):
    """
    Supplier master.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.PROTECT,
        related_name="suppliers",
    )

    name = models.CharField(max_length=200)
    tax_id = models.CharField(max_length=50, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["tenant", "name"], name="supplier_tenant_name_idx"),
            models.Index(fields=["is_active"], name="supplier_active_idx"),
        ]

    def __str__(self):
        return self.name
