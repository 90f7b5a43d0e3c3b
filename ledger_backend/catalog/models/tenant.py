# catalog/models/tenant.py

import uuid

from django.conf import settings
from django.db import models


class Tenant(models.Model):
    """
    Isolation boundary. Every ledger read/write is filtered by tenant.

    members: users allowed to act on this tenant through the API.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)

    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="tenants",
    )

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
