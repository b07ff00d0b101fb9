"""Application service: Dispatch Invoice use case.

Marks the invoice as sent with a fresh payment token from the payment
collaborator, then notifies the customer.  Dispatching again only
replaces the token.
"""

from __future__ import annotations

from typing import Callable

import structlog

from rentals.application.common import (
    ensure_vendor_access,
    load_invoice,
    load_order,
    notify,
)
from rentals.application.dto import InvoiceDTO
from rentals.application.mapping import invoice_to_dto
from rentals.application.ports import NotificationEvent, Notifier, PaymentGateway
from rentals.domain.model.actor import Actor
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.time_utils import utcnow

logger = structlog.get_logger(__name__)


class DispatchInvoiceHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        payments: PaymentGateway,
        notifier: Notifier,
        payment_base_url: str | None = None,
        clock: Callable = utcnow,
    ) -> None:
        self._uow = uow
        self._payments = payments
        self._notifier = notifier
        self._payment_base_url = payment_base_url
        self._clock = clock

    def handle(self, actor: Actor, invoice_id: int) -> InvoiceDTO:
        # The provider is called before the store is locked
        token = self._payments.generate_payment_reference(invoice_id)

        with self._uow:
            invoice = load_invoice(self._uow, invoice_id)
            ensure_vendor_access(actor, load_order(self._uow, invoice.order_id))

            invoice.dispatch(token, self._clock())
            self._uow.invoices.save(invoice)
            self._uow.commit()

        logger.info("invoice_dispatched", invoice_id=invoice.id, number=invoice.number)
        dto = invoice_to_dto(invoice, self._payment_base_url)
        notify(self._notifier, NotificationEvent.INVOICE_DISPATCHED, dto)
        return dto
