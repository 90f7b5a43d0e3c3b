# common/tests/fixtures.py

"""
Shared test data for ledger tests.

One tenant with a member user, two warehouses, one supplier and two products.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from catalog.models import Product, Supplier, Tenant, Warehouse
from inventory.services.intake import receive_inbound
from inventory.services.unit_of_work import ledger_transaction

User = get_user_model()


class LedgerFixturesMixin:
    def setUp(self):
        super().setUp()
        self.user = User.objects.create_user(
            username="ledger_admin",
            email="ledger_admin@example.com",
            password="password123",
        )
        self.tenant = Tenant.objects.create(name="Acme Distribution", slug="acme")
        self.tenant.members.add(self.user)

        self.main = Warehouse.objects.create(tenant=self.tenant, name="Main", code="MAIN")
        self.branch = Warehouse.objects.create(tenant=self.tenant, name="Branch", code="BR1")

        self.supplier = Supplier.objects.create(tenant=self.tenant, name="Global Supplies")

        self.product = Product.objects.create(tenant=self.tenant, sku="PCM-500", name="Paracetamol 500mg")
        self.other_product = Product.objects.create(tenant=self.tenant, sku="IBU-200", name="Ibuprofen 200mg")

    def make_other_tenant(self):
        tenant = Tenant.objects.create(name="Other Co", slug="other")
        warehouse = Warehouse.objects.create(tenant=tenant, name="Other Main")
        product = Product.objects.create(tenant=tenant, sku="PCM-500", name="Paracetamol 500mg")
        return tenant, warehouse, product

    def receive(self, quantity, unit_cost, *, product=None, warehouse=None, days_ago=0, batch_number=None, **kwargs):
        """Receive a batch dated `days_ago` days in the past (or at `received_at`)."""
        received_at = kwargs.pop("received_at", None) or timezone.now() - timedelta(days=days_ago)
        with ledger_transaction(self.tenant, self.user) as ctx:
            receipt = receive_inbound(
                ctx,
                product=product or self.product,
                warehouse=warehouse or self.main,
                quantity=Decimal(str(quantity)),
                unit_cost=Decimal(str(unit_cost)),
                batch_number=batch_number,
                received_at=received_at,
                **kwargs,
            )
        return receipt.batch
