# inventory/tests/test_transfers.py

from datetime import date, timedelta
from decimal import Decimal

from django.db.models import Sum
from django.test import TestCase

from common.exceptions import InsufficientStockError, SameWarehouseTransferError
from common.tests.fixtures import LedgerFixturesMixin
from inventory.models import Batch, Movement
from inventory.services.queries import warehouse_stock
from inventory.services.transfers import transfer_stock


class TransferTests(LedgerFixturesMixin, TestCase):
    """
    Warehouse transfers.

    GUARANTEES:
    - Origin is consumed FIFO; destination gets one batch per consumed slice
    - Destination batches inherit cost, supplier and expiry
    - System-wide quantity is conserved
    - A failing line rolls back the whole transfer
    """

    def setUp(self):
        super().setUp()
        self.expiry = date.today() + timedelta(days=90)
        self.b1 = self.receive(
            10, "5.00", days_ago=2, batch_number="B1", supplier=self.supplier, expires_at=self.expiry
        )
        self.b2 = self.receive(10, "8.00", days_ago=1, batch_number="B2")

    def _total_quantity(self):
        return Batch.objects.filter(tenant=self.tenant).aggregate(t=Sum("quantity_current"))["t"]

    def test_transfer_moves_stock_fifo(self):
        results = transfer_stock(
            self.tenant,
            self.user,
            origin=self.main.id,
            destination=self.branch.id,
            lines=[{"product_id": self.product.id, "quantity": "15"}],
        )

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0]["status"], "OK")
        self.assertEqual(Decimal(results[0]["quantity"]), Decimal("15"))
        self.assertEqual(len(results[0]["batches"]), 2)

        self.assertEqual(warehouse_stock(self.tenant, product=self.product, warehouse=self.main), Decimal("5"))
        self.assertEqual(warehouse_stock(self.tenant, product=self.product, warehouse=self.branch), Decimal("15"))
        self.assertEqual(self._total_quantity(), Decimal("20"))

    def test_destination_batches_inherit_source_attributes(self):
        transfer_stock(
            self.tenant,
            self.user,
            origin=self.main,
            destination=self.branch,
            lines=[{"product": self.product, "quantity": 15}],
        )

        from_b1 = Batch.objects.get(warehouse=self.branch, metadata__source_batch_id=str(self.b1.id))
        self.assertEqual(from_b1.quantity_initial, Decimal("10"))
        self.assertEqual(from_b1.unit_cost, Decimal("5"))
        self.assertEqual(from_b1.supplier, self.supplier)
        self.assertEqual(from_b1.expires_at, self.expiry)

        from_b2 = Batch.objects.get(warehouse=self.branch, metadata__source_batch_id=str(self.b2.id))
        self.assertEqual(from_b2.quantity_initial, Decimal("5"))
        self.assertEqual(from_b2.unit_cost, Decimal("8"))
        self.assertIsNone(from_b2.supplier)

    def test_inbound_movement_references_outbound_movement(self):
        transfer_stock(
            self.tenant,
            self.user,
            origin=self.main,
            destination=self.branch,
            lines=[{"product": self.product, "quantity": 4}],
        )

        out = Movement.objects.get(
            movement_type=Movement.MovementType.TRANSFER, direction=Movement.Direction.OUT
        )
        inbound = Movement.objects.get(
            movement_type=Movement.MovementType.TRANSFER, direction=Movement.Direction.IN
        )
        self.assertEqual(out.destination_warehouse, self.branch)
        self.assertEqual(out.reference_type, Movement.ReferenceType.TRANSFER)
        self.assertEqual(inbound.reference_type, Movement.ReferenceType.MOVEMENT)
        self.assertEqual(inbound.reference_id, str(out.id))
        self.assertEqual(inbound.origin_warehouse, self.main)
        self.assertEqual(inbound.destination_warehouse, self.branch)
        self.assertEqual(inbound.total_cost, out.total_cost)

    def test_same_warehouse_is_rejected(self):
        with self.assertRaises(SameWarehouseTransferError):
            transfer_stock(
                self.tenant,
                self.user,
                origin=self.main.id,
                destination=self.main.id,
                lines=[{"product": self.product, "quantity": 1}],
            )

    def test_failing_line_rolls_back_earlier_lines(self):
        self.receive(3, "2.00", product=self.other_product, batch_number="OTHER-1")

        with self.assertRaises(InsufficientStockError):
            transfer_stock(
                self.tenant,
                self.user,
                origin=self.main,
                destination=self.branch,
                lines=[
                    {"product": self.product, "quantity": 5},
                    {"product": self.other_product, "quantity": 10},
                ],
            )

        self.b1.refresh_from_db()
        self.assertEqual(self.b1.quantity_current, Decimal("10"))
        self.assertFalse(Batch.objects.filter(warehouse=self.branch).exists())
        self.assertFalse(Movement.objects.filter(movement_type=Movement.MovementType.TRANSFER).exists())
