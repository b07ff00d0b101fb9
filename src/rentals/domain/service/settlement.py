"""Domain service: Invoice issuing and settlement at return."""

from __future__ import annotations

from datetime import datetime

from rentals.domain.exceptions import InvalidTransitionError, ValidationError
from rentals.domain.model.invoice import Invoice
from rentals.domain.model.order import Order, OrderStatus, PaymentStatus
from rentals.domain.model.value_objects import Money
from rentals.domain.service import financial_calculator


def issue_invoice(order: Order, existing: Invoice | None, number: str, at: datetime) -> Invoice:
    """Draft the order's invoice and move the order to INVOICED.

    The amount due is recomputed from the lines; the down payment counts
    as already paid.
    """
    if order.status is not OrderStatus.CONFIRMED:
        raise InvalidTransitionError(
            "invoice", order.status.value, [OrderStatus.CONFIRMED.value]
        )
    if existing is not None:
        raise ValidationError(
            f"Invoice {existing.number} already exists for order {order.reference}"
        )

    amount_due = financial_calculator.total(order)
    invoice = Invoice(
        id=None,
        order_id=order.id,  # type: ignore[arg-type]
        number=number,
        amount_due=amount_due,
        amount_paid=min(order.down_payment, amount_due),
        created_at=at,
    )
    order.total_amount = amount_due
    order.mark_invoiced()
    order.payment_status = invoice.payment_status
    return invoice


def reconcile_on_return(
    order: Order,
    invoice: Invoice | None,
    late_fee: Money,
    late_fee_paid: Money | None = None,
) -> None:
    """Add a late fee to what the customer owes and settle payment status.

    Policy: a PAID order stays PAID only when the fee is paid in full at
    the same moment; otherwise it drops to PARTIAL.  An order that had
    paid nothing stays UNPAID.
    """
    paid_now = late_fee_paid or Money.zero()
    if late_fee.is_zero:
        if not paid_now.is_zero:
            raise ValidationError("No late fee is owed")
        return
    if paid_now > late_fee:
        raise ValidationError(
            f"Late fee payment {paid_now} exceeds late fee {late_fee}"
        )

    order.total_amount = order.total_amount + late_fee

    if invoice is not None:
        invoice.add_charge(late_fee)
        if not paid_now.is_zero:
            invoice.record_payment(paid_now)
        order.payment_status = invoice.payment_status
        return

    if paid_now >= late_fee:
        return
    if order.payment_status is not PaymentStatus.UNPAID:
        order.payment_status = PaymentStatus.PARTIAL
