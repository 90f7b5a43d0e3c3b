# audits/tests/test_audits.py

from decimal import Decimal

from django.test import TestCase

from audits.models import InventoryAudit
from audits.services.audit_service import (
    cancel_audit,
    close_audit,
    create_audit,
    list_audits,
    update_audit_item,
)
from catalog.models import Product
from common.exceptions import InvalidStateError, LedgerNotFoundError, LedgerValidationError, NoActiveProductsError
from common.tests.fixtures import LedgerFixturesMixin
from inventory.models import Batch, Movement
from inventory.services.fifo import OutboundReason, register_outbound
from inventory.services.queries import warehouse_stock


class AuditReconciliationTests(LedgerFixturesMixin, TestCase):
    """
    Physical count reconciliation.

    GUARANTEES:
    - Creating an audit snapshots every active product's warehouse stock
    - Closing posts AUDIT movements for counted, non-zero variances only
    - Deficits are consumed FIFO; surpluses become one new batch
    """

    def setUp(self):
        super().setUp()
        self.b1 = self.receive(10, "5.00", days_ago=2, batch_number="B1")
        self.b2 = self.receive(10, "8.00", days_ago=1, batch_number="B2")
        self.audit = create_audit(self.tenant, warehouse=self.main.id, name="Quarterly count")

    def _item(self, product):
        return self.audit.items.get(product=product)

    def test_create_snapshots_active_products(self):
        self.assertEqual(self.audit.status, InventoryAudit.Status.PENDING)
        self.assertTrue(self.audit.code.startswith("AUD-"))
        self.assertEqual(self.audit.items.count(), 2)
        self.assertEqual(self._item(self.product).system_stock, Decimal("20"))
        self.assertEqual(self._item(self.other_product).system_stock, Decimal("0"))
        self.assertIsNone(self._item(self.product).counted_stock)

    def test_first_count_starts_the_audit(self):
        item = update_audit_item(self.tenant, self.audit.id, self._item(self.product).id, counted_quantity=15)

        self.assertEqual(item.variance, Decimal("-5"))
        self.audit.refresh_from_db()
        self.assertEqual(self.audit.status, InventoryAudit.Status.IN_PROGRESS)
        self.assertIsNotNone(self.audit.started_at)

    def test_negative_count_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            update_audit_item(self.tenant, self.audit.id, self._item(self.product).id, counted_quantity=-1)

    def test_unknown_item_is_not_found(self):
        with self.assertRaises(LedgerNotFoundError):
            update_audit_item(
                self.tenant, self.audit.id, "00000000-0000-0000-0000-000000000000", counted_quantity=1
            )

    def test_close_consumes_deficit_fifo(self):
        update_audit_item(self.tenant, self.audit.id, self._item(self.product).id, counted_quantity=15)

        audit = close_audit(self.tenant, self.audit.id, self.user)

        self.assertEqual(audit.status, InventoryAudit.Status.COMPLETED)
        self.assertEqual(audit.closed_by, self.user)
        self.assertIsNotNone(audit.completed_at)
        self.assertEqual(audit.total_variance, Decimal("-5"))
        # valued at the newest batch cost with stock (B2 @ 8)
        self.assertEqual(audit.variance_cost, Decimal("-40"))

        self.b1.refresh_from_db()
        self.b2.refresh_from_db()
        self.assertEqual(self.b1.quantity_current, Decimal("5"))
        self.assertEqual(self.b2.quantity_current, Decimal("10"))
        self.assertEqual(warehouse_stock(self.tenant, product=self.product, warehouse=self.main), Decimal("15"))

        movement = Movement.objects.get(movement_type=Movement.MovementType.AUDIT)
        self.assertEqual(movement.direction, Movement.Direction.OUT)
        self.assertEqual(movement.reference_type, Movement.ReferenceType.AUDIT)
        self.assertEqual(movement.reference_id, str(audit.id))

        item = self._item(self.product)
        self.assertTrue(item.is_adjusted)
        self.assertEqual(item.variance_cost, Decimal("-40"))
        self.assertEqual(item.unadjusted_quantity, Decimal("0"))

    def test_uncounted_items_are_skipped(self):
        update_audit_item(self.tenant, self.audit.id, self._item(self.product).id, counted_quantity=15)
        close_audit(self.tenant, self.audit.id, self.user)

        other = self._item(self.other_product)
        self.assertFalse(other.is_adjusted)
        self.assertIsNone(other.counted_stock)
        self.assertFalse(Batch.objects.filter(product=self.other_product).exists())

    def test_zero_variance_posts_nothing(self):
        update_audit_item(self.tenant, self.audit.id, self._item(self.product).id, counted_quantity=20)
        audit = close_audit(self.tenant, self.audit.id, self.user)

        self.assertEqual(audit.total_variance, Decimal("0"))
        self.assertFalse(Movement.objects.filter(movement_type=Movement.MovementType.AUDIT).exists())

    def test_surplus_creates_one_audit_batch(self):
        update_audit_item(self.tenant, self.audit.id, self._item(self.product).id, counted_quantity=23)
        audit = close_audit(self.tenant, self.audit.id, self.user)

        batch = Batch.objects.get(batch_number=f"AUDIT-{audit.code}-{self.product.sku}")
        self.assertEqual(batch.quantity_initial, Decimal("3"))
        self.assertEqual(batch.unit_cost, Decimal("8"))
        self.assertEqual(batch.metadata, {"audit_id": str(audit.id)})
        self.assertEqual(audit.variance_cost, Decimal("24"))

        movement = Movement.objects.get(batch=batch)
        self.assertEqual(movement.movement_type, Movement.MovementType.AUDIT)
        self.assertEqual(movement.direction, Movement.Direction.IN)

    def test_surplus_without_cost_history_is_valued_at_zero(self):
        update_audit_item(self.tenant, self.audit.id, self._item(self.other_product).id, counted_quantity=4)
        audit = close_audit(self.tenant, self.audit.id, self.user)

        batch = Batch.objects.get(product=self.other_product)
        self.assertEqual(batch.unit_cost, Decimal("0"))
        self.assertEqual(audit.variance_cost, Decimal("0"))
        self.assertEqual(audit.total_variance, Decimal("4"))

    def test_deficit_beyond_current_stock_is_recorded_as_unadjusted(self):
        update_audit_item(self.tenant, self.audit.id, self._item(self.product).id, counted_quantity=15)
        # stock leaves the warehouse between snapshot and close
        register_outbound(
            self.tenant,
            self.user,
            product=self.product,
            warehouse=self.main,
            quantity=18,
            reason=OutboundReason.SALE,
        )

        audit = close_audit(self.tenant, self.audit.id, self.user)

        self.assertEqual(audit.status, InventoryAudit.Status.COMPLETED)
        item = self._item(self.product)
        self.assertTrue(item.is_adjusted)
        self.assertEqual(item.unadjusted_quantity, Decimal("3"))
        self.assertIn("not fully adjusted", item.notes)
        self.assertEqual(warehouse_stock(self.tenant, product=self.product, warehouse=self.main), Decimal("0"))

    def test_completed_audit_is_read_only(self):
        close_audit(self.tenant, self.audit.id, self.user)

        with self.assertRaises(InvalidStateError):
            update_audit_item(self.tenant, self.audit.id, self._item(self.product).id, counted_quantity=1)
        with self.assertRaises(InvalidStateError):
            close_audit(self.tenant, self.audit.id, self.user)
        with self.assertRaises(InvalidStateError):
            cancel_audit(self.tenant, self.audit.id)

    def test_cancel(self):
        audit = cancel_audit(self.tenant, self.audit.id)
        self.assertEqual(audit.status, InventoryAudit.Status.CANCELLED)
        self.assertIsNotNone(audit.cancelled_at)

        with self.assertRaises(InvalidStateError):
            close_audit(self.tenant, self.audit.id, self.user)

    def test_list_filters(self):
        cancel_audit(self.tenant, self.audit.id)
        create_audit(self.tenant, warehouse=self.branch)

        self.assertEqual(list_audits(self.tenant).count(), 2)
        self.assertEqual(list_audits(self.tenant, status=InventoryAudit.Status.CANCELLED).count(), 1)
        self.assertEqual(list_audits(self.tenant, warehouse=self.branch).count(), 1)


class AuditCreationTests(LedgerFixturesMixin, TestCase):
    def test_no_active_products(self):
        Product.objects.filter(tenant=self.tenant).update(is_active=False)
        with self.assertRaises(NoActiveProductsError):
            create_audit(self.tenant, warehouse=self.main)
        self.assertFalse(InventoryAudit.objects.exists())

    def test_inactive_products_are_not_snapshotted(self):
        Product.objects.filter(id=self.other_product.id).update(is_active=False)
        audit = create_audit(self.tenant, warehouse=self.main)
        self.assertEqual(list(audit.items.values_list("product_id", flat=True)), [self.product.id])

    def test_warehouse_of_other_tenant_is_not_found(self):
        _, other_warehouse, _ = self.make_other_tenant()
        with self.assertRaises(LedgerNotFoundError):
            create_audit(self.tenant, warehouse=other_warehouse.id)

    def test_surplus_for_longest_sku_still_closes(self):
        long_sku = Product.objects.create(tenant=self.tenant, sku="S" * 128, name="Long SKU item")
        audit = create_audit(self.tenant, warehouse=self.main)
        item = audit.items.get(product=long_sku)
        update_audit_item(self.tenant, audit.id, item.id, counted_quantity=3)

        audit = close_audit(self.tenant, audit.id, self.user)

        self.assertEqual(audit.status, InventoryAudit.Status.COMPLETED)
        batch = Batch.objects.get(product=long_sku)
        self.assertEqual(len(batch.batch_number), 128)
        self.assertTrue(batch.batch_number.startswith(f"AUDIT-{audit.code}-SSS"))
        self.assertTrue(batch.batch_number.endswith(long_sku.id.hex[:8].upper()))
        self.assertEqual(batch.quantity_current, Decimal("3"))
        self.assertEqual(batch.metadata, {"audit_id": str(audit.id)})
