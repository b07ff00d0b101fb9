"""Application service: Show Order use case (query)."""

from __future__ import annotations

from rentals.application.common import load_invoice, load_order
from rentals.application.dto import InvoiceDTO, OrderDTO
from rentals.application.mapping import invoice_to_dto, order_to_dto
from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.repository.unit_of_work import UnitOfWork


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow:
            order = load_order(self._uow, order_id)
        return order_to_dto(order)


class ShowInvoiceHandler:

    def __init__(self, uow: UnitOfWork, payment_base_url: str | None = None) -> None:
        self._uow = uow
        self._payment_base_url = payment_base_url

    def handle(self, invoice_id: int | None = None, order_id: int | None = None) -> InvoiceDTO:
        with self._uow:
            if invoice_id is not None:
                invoice = load_invoice(self._uow, invoice_id)
            else:
                invoice = self._uow.invoices.get_by_order_id(order_id)  # type: ignore[arg-type]
                if invoice is None:
                    raise EntityNotFoundError(f"No invoice for order #{order_id}")
        return invoice_to_dto(invoice, self._payment_base_url)
