"""Application service: Create Invoice use case (CONFIRMED -> INVOICED)."""

from __future__ import annotations

from typing import Callable

import structlog

from rentals.application.common import ensure_vendor_access, load_order
from rentals.application.dto import InvoiceDTO
from rentals.application.mapping import invoice_to_dto
from rentals.domain.model.actor import Actor
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.settlement import issue_invoice
from rentals.domain.time_utils import utcnow

logger = structlog.get_logger(__name__)


class CreateInvoiceHandler:

    def __init__(self, uow: UnitOfWork, clock: Callable = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(self, actor: Actor, order_id: int) -> InvoiceDTO:
        now = self._clock()
        with self._uow:
            order = load_order(self._uow, order_id)
            ensure_vendor_access(actor, order)

            existing = self._uow.invoices.get_by_order_id(order_id)
            invoice = issue_invoice(
                order, existing, self._uow.invoices.next_number(now.year), now
            )

            self._uow.invoices.save(invoice)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "invoice_created",
            order_id=order.id,
            invoice_id=invoice.id,
            number=invoice.number,
            amount_due=str(invoice.amount_due),
        )
        return invoice_to_dto(invoice)
