# common/tenancy.py

"""
Tenant-scoped lookups.

Rows that belong to another tenant behave exactly like missing rows.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError

from common.exceptions import LedgerNotFoundError


def tenant_id_of(tenant):
    return getattr(tenant, "id", tenant)


def get_for_tenant(model, tenant, obj_or_id, *, label: str | None = None, queryset=None):
    """
    Resolve a model instance (or primary key) inside `tenant`.

    Accepts either an instance (re-checked against the tenant) or a raw id.
    """
    label = label or model.__name__
    if obj_or_id is None or obj_or_id == "":
        raise LedgerNotFoundError(f"{label} not found", id=None)

    if isinstance(obj_or_id, model):
        if obj_or_id.tenant_id != tenant_id_of(tenant):
            raise LedgerNotFoundError(f"{label} not found", id=str(obj_or_id.pk))
        if queryset is None:
            return obj_or_id
        obj_or_id = obj_or_id.pk

    qs = queryset if queryset is not None else model.objects.all()
    try:
        return qs.get(pk=obj_or_id, tenant_id=tenant_id_of(tenant))
    except (model.DoesNotExist, DjangoValidationError, ValueError):
        raise LedgerNotFoundError(f"{label} not found", id=str(obj_or_id))
