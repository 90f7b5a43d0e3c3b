# catalog/apps.py

"""
CATALOG APP CONFIG

Master data referenced by the ledger:
- Tenant (isolation boundary for every query)
- Warehouse, Product, Supplier

No CRUD services live here; callers validate identifiers before
invoking the ledger engine.
"""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
    verbose_name = "Catalog"
