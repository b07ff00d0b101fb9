"""Application services: Record Payment and Refresh Payment Status.

Payments are recorded against the order's invoice; the order's payment
status always mirrors the invoice afterwards.
"""

from __future__ import annotations

import structlog

from rentals.application.common import (
    ensure_party_access,
    ensure_vendor_access,
    load_invoice,
    load_order,
)
from rentals.application.dto import InvoiceDTO
from rentals.application.mapping import invoice_to_dto
from rentals.application.ports import PaymentGateway
from rentals.domain.model.actor import Actor
from rentals.domain.model.order import PaymentStatus
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class RecordPaymentHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: Actor, invoice_id: int, amount: str) -> InvoiceDTO:
        payment = Money.of(amount)

        with self._uow:
            invoice = load_invoice(self._uow, invoice_id)
            order = load_order(self._uow, invoice.order_id)
            ensure_party_access(actor, order)

            invoice.record_payment(payment)
            order.payment_status = invoice.payment_status

            self._uow.invoices.save(invoice)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "payment_recorded",
            invoice_id=invoice.id,
            amount=str(payment),
            payment_status=invoice.payment_status.value,
        )
        return invoice_to_dto(invoice)


class RefreshPaymentStatusHandler:
    """Sync an invoice with what the payment provider reports.

    Used on demand (e.g. after the customer returns from the payment
    page); the engine never polls.  The invoice stays the record of
    money received: a PAID report settles its outstanding balance, any
    other report leaves it alone.  The order then mirrors the invoice.
    """

    def __init__(self, uow: UnitOfWork, payments: PaymentGateway) -> None:
        self._uow = uow
        self._payments = payments

    def handle(self, actor: Actor, invoice_id: int) -> InvoiceDTO:
        reported = self._payments.query_payment_status(invoice_id)

        with self._uow:
            invoice = load_invoice(self._uow, invoice_id)
            order = load_order(self._uow, invoice.order_id)
            ensure_vendor_access(actor, order)

            settled = Money.zero()
            if reported is PaymentStatus.PAID and not invoice.balance.is_zero:
                settled = invoice.balance
                invoice.record_payment(settled)
            order.payment_status = invoice.payment_status

            self._uow.invoices.save(invoice)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "payment_status_refreshed",
            invoice_id=invoice.id,
            reported=reported.value,
            settled=str(settled),
            payment_status=invoice.payment_status.value,
        )
        return invoice_to_dto(invoice)
