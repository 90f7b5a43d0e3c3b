# inventory/services/transfers.py

"""
TRANSFER ORCHESTRATOR

Moves stock between two warehouses of the same tenant in ONE unit of work:

1) FIFO consumption at origin (type TRANSFER, destination recorded)
2) For each consumed slice, a new destination batch that inherits
   supplier + expiry + unit cost of the source batch
3) One TRANSFER / IN movement per destination batch, referencing the
   outbound movement (reference MOVEMENT/<outbound movement id>)

System-wide quantity is conserved; any failure rolls back every line.
"""

from __future__ import annotations

import logging

from catalog.models import Product, Warehouse
from common.exceptions import SameWarehouseTransferError
from common.tenancy import get_for_tenant
from inventory.models import Batch, Movement

from .fifo import consume_fifo
from .intake import receive_inbound
from .unit_of_work import ledger_transaction

logger = logging.getLogger(__name__)


def transfer_stock(tenant, user, *, origin, destination, lines, notes: str = "") -> list[dict]:
    """
    lines: iterable of {"product": <Product|id>, "quantity": <number>}
    """
    origin_id = getattr(origin, "id", origin)
    destination_id = getattr(destination, "id", destination)
    if str(origin_id) == str(destination_id):
        raise SameWarehouseTransferError(
            "Origin and destination warehouses must be different",
            warehouse_id=str(origin_id),
        )

    results = []

    with ledger_transaction(tenant, user) as ctx:
        origin = get_for_tenant(Warehouse, tenant, origin, label="Origin warehouse")
        destination = get_for_tenant(Warehouse, tenant, destination, label="Destination warehouse")

        for line in lines:
            product = get_for_tenant(Product, tenant, line.get("product") or line.get("product_id"))

            consumption = consume_fifo(
                ctx,
                product=product,
                warehouse=origin,
                quantity=line.get("quantity"),
                movement_type=Movement.MovementType.TRANSFER,
                reference_type=Movement.ReferenceType.TRANSFER,
                destination_warehouse=destination,
                notes=f"Transfer out: {notes}" if notes else "Transfer between warehouses",
            )

            source_batches = {
                b.id: b
                for b in Batch.objects.using(ctx.using).filter(
                    id__in=[r.batch_id for r in consumption.records]
                )
            }

            created = []
            for record in consumption.records:
                source = source_batches[record.batch_id]
                receipt = receive_inbound(
                    ctx,
                    product=product,
                    warehouse=destination,
                    quantity=record.quantity,
                    unit_cost=record.unit_cost,
                    supplier=source.supplier,
                    expires_at=source.expires_at,
                    movement_type=Movement.MovementType.TRANSFER,
                    reference_type=Movement.ReferenceType.MOVEMENT,
                    reference_id=record.movement_id,
                    origin_warehouse=origin,
                    notes=(
                        f"Transfer in: {notes} (source batch {source.batch_number})"
                        if notes
                        else f"Transfer receipt (source batch {source.batch_number})"
                    ),
                    metadata={"source_batch_id": str(source.id)},
                )
                created.append(
                    {
                        "source_batch_id": str(source.id),
                        "source_batch_number": source.batch_number,
                        "outbound_movement_id": str(record.movement_id),
                        "batch_id": str(receipt.batch.id),
                        "batch_number": receipt.batch.batch_number,
                        "inbound_movement_id": str(receipt.movement.id),
                        "quantity": str(record.quantity),
                        "unit_cost": str(record.unit_cost),
                    }
                )

            results.append(
                {
                    "product_id": str(product.id),
                    "quantity": str(consumption.total_quantity),
                    "status": "OK",
                    "batches": created,
                }
            )

    logger.info(
        "Transfer registered",
        extra={
            "tenant_id": str(ctx.tenant_id),
            "origin_id": str(origin.id),
            "destination_id": str(destination.id),
            "lines": len(results),
        },
    )

    return results
