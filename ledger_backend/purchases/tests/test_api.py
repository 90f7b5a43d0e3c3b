# purchases/tests/test_api.py

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from common.tests.fixtures import LedgerFixturesMixin
from purchases.models import PurchaseOrder


class PurchaseOrderAPITests(LedgerFixturesMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.client.force_authenticate(self.user)
        self.client.credentials(HTTP_X_TENANT_ID=str(self.tenant.id))

    def _create_order(self):
        res = self.client.post(
            reverse("purchase-order-list-create"),
            {"supplier_id": str(self.supplier.id), "order_number": "PO-API-1"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        return res.data["id"]

    def test_full_flow(self):
        order_id = self._create_order()

        res = self.client.post(
            reverse("purchase-order-item-create", args=[order_id]),
            {"product_id": str(self.product.id), "quantity_ordered": "10", "unit_price": "3.00"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)

        res = self.client.post(reverse("purchase-order-send", args=[order_id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], PurchaseOrder.Status.ORDERED)

        res = self.client.post(
            reverse("purchase-order-receive", args=[order_id]),
            {
                "warehouse_id": str(self.main.id),
                "items": [{"product_id": str(self.product.id), "quantity": "10", "unit_cost": "3.00"}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["order"]["status"], PurchaseOrder.Status.RECEIVED)
        self.assertEqual(Decimal(res.data["payable"]["total_amount"]), Decimal("30.00"))

        res = self.client.get(reverse("purchase-order-detail", args=[order_id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(res.data["items"][0]["quantity_received"]), Decimal("10"))

    def test_receiving_a_draft_is_400(self):
        order_id = self._create_order()
        res = self.client.post(
            reverse("purchase-order-receive", args=[order_id]),
            {
                "warehouse_id": str(self.main.id),
                "items": [{"product_id": str(self.product.id), "quantity": "1", "unit_cost": "1"}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["code"], "INVALID_STATE")

    def test_list_is_tenant_scoped(self):
        self._create_order()
        other_tenant, _, _ = self.make_other_tenant()
        other_tenant.members.add(self.user)

        self.client.credentials(HTTP_X_TENANT_ID=str(other_tenant.id))
        res = self.client.get(reverse("purchase-order-list-create"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data, [])

    def test_unknown_order_is_404(self):
        res = self.client.get(
            reverse("purchase-order-detail", args=["00000000-0000-0000-0000-000000000000"])
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
