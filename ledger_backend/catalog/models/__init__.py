"""
PATH: catalog/models/__init__.py

Catalog models export surface.
"""

from .product import Product
from .supplier import Supplier
from .tenant import Tenant
from .warehouse import Warehouse

__all__ = [
    "Tenant",
    "Warehouse",
    "Product",
    "Supplier",
]
