# inventory/services/unit_of_work.py

"""
LEDGER UNIT OF WORK

Every ledger primitive (FIFO consumption, inbound receiver) receives an explicit
LedgerContext instead of relying on an ambient transaction. Orchestrators open
one context and pass it down; the call graph shows which writes share one
atomic unit.

    with ledger_transaction(tenant, user) as ctx:
        consume_fifo(ctx, ...)
        receive_inbound(ctx, ...)

Leaving the block with an exception rolls back every write made through ctx.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

from django.db import DEFAULT_DB_ALIAS, transaction

from common.exceptions import LedgerIntegrityError


@dataclass(frozen=True)
class LedgerContext:
    tenant: Any
    user: Any = None
    using: str = DEFAULT_DB_ALIAS

    @property
    def tenant_id(self):
        return getattr(self.tenant, "id", self.tenant)

    def require_atomic(self) -> None:
        """Ledger primitives refuse to write outside an atomic block."""
        if not transaction.get_connection(self.using).in_atomic_block:
            raise LedgerIntegrityError(
                "Ledger primitives must run inside ledger_transaction()"
            )


@contextmanager
def ledger_transaction(tenant, user=None, *, using: str = DEFAULT_DB_ALIAS) -> Iterator[LedgerContext]:
    if tenant is None:
        raise LedgerIntegrityError("tenant is required for a ledger transaction")

    with transaction.atomic(using=using):
        yield LedgerContext(tenant=tenant, user=user, using=using)
