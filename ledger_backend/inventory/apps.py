# inventory/apps.py

"""
INVENTORY APP CONFIG

Owns the ledger core:
- Batch (FIFO cost layers) and the append-only Movement journal
- FIFO consumption, inbound receiving and warehouse transfers
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Inventory Ledger"
