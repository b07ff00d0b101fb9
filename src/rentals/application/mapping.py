"""Domain → DTO mapping shared by the query and command handlers."""

from __future__ import annotations

from datetime import datetime

from rentals.application.dto import InvoiceDTO, OrderDTO, OrderLineDTO, ProductDTO
from rentals.domain.model.invoice import Invoice
from rentals.domain.model.order import Order
from rentals.domain.model.product import Product
from rentals.domain.service import financial_calculator

_FORMAT = "%Y-%m-%d %H:%M UTC"


def _fmt(moment: datetime | None) -> str | None:
    return moment.strftime(_FORMAT) if moment is not None else None


def order_to_dto(order: Order) -> OrderDTO:
    subtotal = financial_calculator.subtotal(order.lines)
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        reference=order.reference,
        customer_id=order.customer_id,
        vendor_id=order.vendor_id,
        status=order.status.value,
        payment_status=order.payment_status.value,
        lines=[
            OrderLineDTO(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
                start=line.period.start.strftime(_FORMAT),
                end=line.period.end.strftime(_FORMAT),
            )
            for line in order.lines
        ],
        subtotal=str(subtotal),
        discount=str(order.discount),
        shipping=str(order.shipping),
        tax=str(financial_calculator.tax_amount(subtotal, order.tax_rate).rounded()),
        total=str(order.total_amount),
        late_fee=str(order.late_fee),
        rejection_reason=order.rejection_reason,
        created_at=_fmt(order.created_at),  # type: ignore[arg-type]
        sent_at=_fmt(order.sent_at),
    )


def invoice_to_dto(invoice: Invoice, payment_base_url: str | None = None) -> InvoiceDTO:
    link = None
    if invoice.payment_token and payment_base_url:
        link = f"{payment_base_url.rstrip('/')}/{invoice.payment_token}"
    return InvoiceDTO(
        id=invoice.id,  # type: ignore[arg-type]
        order_id=invoice.order_id,
        number=invoice.number,
        amount_due=str(invoice.amount_due),
        amount_paid=str(invoice.amount_paid),
        balance=str(invoice.balance),
        payment_status=invoice.payment_status.value,
        sent_at=_fmt(invoice.sent_at),
        payment_link=link,
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        vendor_id=product.vendor_id,
        name=product.name,
        quantity_on_hand=product.quantity_on_hand,
        rent_price=str(product.rent_price),
        rent_unit=product.rent_unit.value,
    )
