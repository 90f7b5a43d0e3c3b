# inventory/tests/test_api.py

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from common.tests.fixtures import LedgerFixturesMixin
from inventory.models import Movement
from inventory.services.intake import register_inbound


class InventoryAPITests(LedgerFixturesMixin, APITestCase):
    """
    HTTP surface for the ledger.

    GUARANTEES:
    - A tenant header for a tenant the user belongs to is required
    - Ledger errors map to 400 / 404 with a stable code
    """

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.user)
        self.client.credentials(HTTP_X_TENANT_ID=str(self.tenant.id))

    def test_missing_tenant_header_is_forbidden(self):
        self.client.credentials()
        res = self.client.get(reverse("inventory-movements"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_foreign_tenant_header_is_forbidden(self):
        other_tenant, _, _ = self.make_other_tenant()
        self.client.credentials(HTTP_X_TENANT_ID=str(other_tenant.id))
        res = self.client.get(reverse("inventory-movements"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_malformed_tenant_header_is_forbidden(self):
        self.client.credentials(HTTP_X_TENANT_ID="not-a-uuid")
        res = self.client.get(reverse("inventory-movements"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated_is_rejected(self):
        self.client.force_authenticate(None)
        res = self.client.get(reverse("inventory-movements"))
        self.assertIn(res.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_inbound_then_outbound(self):
        res = self.client.post(
            reverse("inventory-inbound"),
            {
                "product_id": str(self.product.id),
                "warehouse_id": str(self.main.id),
                "quantity": "10",
                "unit_cost": "5.00",
                "batch_number": "API-1",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["batch"]["batch_number"], "API-1")

        res = self.client.post(
            reverse("inventory-outbound"),
            {
                "product_id": str(self.product.id),
                "warehouse_id": str(self.main.id),
                "quantity": "4",
                "reason": "CONSUME",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["movement_type"], Movement.MovementType.CONSUME)
        self.assertEqual(Decimal(res.data["total_cost"]), Decimal("20"))

    def test_insufficient_stock_is_400_with_code(self):
        self.receive(2, "1.00")
        res = self.client.post(
            reverse("inventory-outbound"),
            {
                "product_id": str(self.product.id),
                "warehouse_id": str(self.main.id),
                "quantity": "5",
                "reason": "SALE",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "INSUFFICIENT_STOCK")

    def test_unknown_product_is_404(self):
        res = self.client.post(
            reverse("inventory-outbound"),
            {
                "product_id": "00000000-0000-0000-0000-000000000000",
                "warehouse_id": str(self.main.id),
                "quantity": "1",
                "reason": "SALE",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["code"], "NOT_FOUND")

    def test_inbound_payable_requires_supplier(self):
        res = self.client.post(
            reverse("inventory-inbound"),
            {
                "product_id": str(self.product.id),
                "warehouse_id": str(self.main.id),
                "quantity": "1",
                "unit_cost": "1",
                "create_payable": True,
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_overlong_text_fields_are_400(self):
        res = self.client.post(
            reverse("inventory-inbound"),
            {
                "product_id": str(self.product.id),
                "warehouse_id": str(self.main.id),
                "quantity": "1",
                "unit_cost": "1",
                "batch_number": "X" * 200,
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("batch_number", res.data)

        self.receive(5, "1.00")
        res = self.client.post(
            reverse("inventory-outbound"),
            {
                "product_id": str(self.product.id),
                "warehouse_id": str(self.main.id),
                "quantity": "1",
                "reason": "SALE",
                "destination_ref": "R" * 300,
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("destination_ref", res.data)
        self.assertEqual(Movement.objects.filter(direction=Movement.Direction.OUT).count(), 0)

    def test_transfer_same_warehouse_is_400(self):
        self.receive(5, "1.00")
        res = self.client.post(
            reverse("inventory-transfer"),
            {
                "origin_warehouse_id": str(self.main.id),
                "destination_warehouse_id": str(self.main.id),
                "items": [{"product_id": str(self.product.id), "quantity": "1"}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "SAME_WAREHOUSE")

    def test_transfer(self):
        self.receive(5, "1.00")
        res = self.client.post(
            reverse("inventory-transfer"),
            {
                "origin_warehouse_id": str(self.main.id),
                "destination_warehouse_id": str(self.branch.id),
                "items": [{"product_id": str(self.product.id), "quantity": "2"}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["items"][0]["status"], "OK")

    def test_stock(self):
        self.receive(5, "1.00", batch_number="S-1")
        res = self.client.get(
            reverse("inventory-stock"),
            {"product_id": str(self.product.id), "warehouse_id": str(self.main.id)},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(res.data["total_stock"]), Decimal("5"))

    def test_expiring(self):
        res = self.client.get(reverse("inventory-expiring"), {"days_ahead": 10})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 0)

    def test_movement_history_filters(self):
        self.receive(10, "1.00", batch_number="H-1")
        self.receive(3, "1.00", warehouse=self.branch, batch_number="H-2", notes="pallet 7")

        res = self.client.get(reverse("inventory-movements"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 2)

        res = self.client.get(reverse("inventory-movements"), {"warehouse": str(self.branch.id)})
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["batch_number"], "H-2")

        res = self.client.get(reverse("inventory-movements"), {"search": "pallet"})
        self.assertEqual(res.data["count"], 1)

        res = self.client.get(reverse("inventory-movements"), {"type": "OUT"})
        self.assertEqual(res.data["count"], 0)

    def test_movement_history_is_tenant_scoped(self):
        other_tenant, other_warehouse, other_product = self.make_other_tenant()
        self.receive(1, "1.00", batch_number="MINE")
        register_inbound(
            other_tenant,
            self.user,
            product=other_product,
            warehouse=other_warehouse,
            quantity=1,
            unit_cost=1,
        )

        res = self.client.get(reverse("inventory-movements"))
        self.assertEqual(res.data["count"], 1)
