"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from rentals.application.approve_order import ApproveOrderHandler
from rentals.application.cancel_order import CancelOrderHandler
from rentals.application.confirm_order import (
    ConfirmOrderHandler,
    ConfirmWithOverrideHandler,
)
from rentals.application.create_quotation import CreateQuotationHandler
from rentals.application.dto import OrderDTO, OrderLineSpec
from rentals.application.pickup_order import PickupOrderHandler
from rentals.application.reject_order import RejectOrderHandler
from rentals.application.return_order import ReturnOrderHandler
from rentals.application.send_quotation import SendQuotationHandler
from rentals.application.show_order import ShowOrderHandler
from rentals.domain.exceptions import DomainException, StockConflictError
from rentals.domain.model.reservation import StockConflict
from rentals.infrastructure.bootstrap import late_fee_policy, notifier, unit_of_work
from rentals.infrastructure.cli.common import DATETIME, require_actor


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.reference}  (status={dto.status}, payment={dto.payment_status})")
    click.echo(f"Customer: {dto.customer_id}   Vendor: {dto.vendor_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.rejection_reason:
        click.echo(f"Rejected: {dto.rejection_reason}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>4} {'From':>20} {'To':>20} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*89}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<20} {line.quantity:>4} {line.start:>20} "
            f"{line.end:>20} {line.unit_price:>10} {line.line_total:>10}"
        )
    click.echo(f"  {'-'*89}")
    click.echo(f"  {'Subtotal':<68} {dto.subtotal:>20}")
    click.echo(f"  {'Shipping':<68} {dto.shipping:>20}")
    click.echo(f"  {'Tax':<68} {dto.tax:>20}")
    click.echo(f"  {'Discount':<68} {dto.discount:>20}")
    click.echo(f"  {'Order Total':<68} {dto.total:>20}")
    if dto.late_fee != "$0.00":
        click.echo(f"  {'Late Fee':<68} {dto.late_fee:>20}")


def _display_conflicts(conflicts: list[StockConflict]) -> None:
    click.echo("Insufficient stock:", err=True)
    click.echo(f"  {'Product':<20} {'Requested':>10} {'Available':>10}  Window", err=True)
    for c in conflicts:
        click.echo(
            f"  {c.product_name:<20} {c.requested_qty:>10} {c.available_qty:>10}  "
            f"{c.start:%Y-%m-%d %H:%M} -> {c.end:%Y-%m-%d %H:%M}",
            err=True,
        )


@click.command("quote")
@click.option("--customer", required=True, help="Customer ID.")
@click.option(
    "--line",
    "lines",
    required=True,
    multiple=True,
    type=(str, int, DATETIME, DATETIME),
    metavar="PRODUCT_ID QTY START END",
    help="One rental line; repeat for more.",
)
@click.option("--discount", default="0", show_default=True)
@click.option("--shipping", default="0", show_default=True)
@click.option("--tax-rate", default="0", show_default=True, help="Percent, 0-100.")
@click.option("--down-payment", default="0", show_default=True)
@click.pass_obj
def order_quote(actor, customer, lines, discount, shipping, tax_rate, down_payment) -> None:
    """Create a rental quotation."""
    specs = [
        OrderLineSpec(product_id=pid, quantity=qty, start=start, end=end)
        for pid, qty, start, end in lines
    ]
    handler = CreateQuotationHandler(unit_of_work())

    try:
        dto = handler.handle(
            require_actor(actor),
            customer_id=customer,
            line_specs=specs,
            discount=discount,
            shipping=shipping,
            tax_rate=tax_rate,
            down_payment=down_payment,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Quotation {dto.reference} created")
    click.echo()
    _display_order(dto)


@click.command("show")
@click.argument("order_id", type=int)
def order_show(order_id: int) -> None:
    """Display an order with its lines and totals."""
    handler = ShowOrderHandler(unit_of_work())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("send")
@click.argument("order_id", type=int)
@click.pass_obj
def order_send(actor, order_id: int) -> None:
    """Send a quotation to the customer."""
    handler = SendQuotationHandler(unit_of_work(), notifier())

    try:
        dto = handler.handle(require_actor(actor), order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Quotation {dto.reference} sent to {dto.customer_id}")


@click.command("approve")
@click.argument("order_id", type=int)
@click.pass_obj
def order_approve(actor, order_id: int) -> None:
    """Approve a quotation."""
    handler = ApproveOrderHandler(unit_of_work(), notifier())

    try:
        dto = handler.handle(require_actor(actor), order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.reference} approved  (status={dto.status})")


@click.command("reject")
@click.argument("order_id", type=int)
@click.option("--reason", required=True, help="Why the quotation is rejected.")
@click.pass_obj
def order_reject(actor, order_id: int, reason: str) -> None:
    """Reject a quotation or an approved order."""
    handler = RejectOrderHandler(unit_of_work(), notifier())

    try:
        dto = handler.handle(require_actor(actor), order_id, reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.reference} rejected: {dto.rejection_reason}")


@click.command("confirm")
@click.argument("order_id", type=int)
@click.option(
    "--allow-override",
    is_flag=True,
    help="On a stock conflict, offer to confirm anyway (admin only).",
)
@click.pass_obj
def order_confirm(actor, order_id: int, allow_override: bool) -> None:
    """Confirm an approved order, reserving its stock."""
    actor = require_actor(actor)
    handler = ConfirmOrderHandler(unit_of_work(), notifier())

    try:
        dto = handler.handle(actor, order_id)
    except StockConflictError as exc:
        _display_conflicts(exc.conflicts)
        if not allow_override:
            raise click.ClickException(str(exc))
        click.confirm("Confirm despite these conflicts?", abort=True)
        try:
            dto = ConfirmWithOverrideHandler(unit_of_work(), notifier()).handle(
                actor, order_id, exc.conflicts
            )
        except StockConflictError as again:
            _display_conflicts(again.conflicts)
            raise click.ClickException(f"Stock changed since the check. {again}")
        except DomainException as again:
            raise click.ClickException(str(again))
        click.echo(f"Order {dto.reference} confirmed with override")
        return
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.reference} confirmed  (status={dto.status})")


@click.command("cancel")
@click.argument("order_id", type=int)
@click.pass_obj
def order_cancel(actor, order_id: int) -> None:
    """Cancel an order, releasing any reserved stock."""
    handler = CancelOrderHandler(unit_of_work(), notifier())

    try:
        dto = handler.handle(require_actor(actor), order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.reference} cancelled")


@click.command("pickup")
@click.argument("order_id", type=int)
@click.pass_obj
def order_pickup(actor, order_id: int) -> None:
    """Hand the goods to the customer (order must be paid)."""
    handler = PickupOrderHandler(unit_of_work(), notifier())

    try:
        dto = handler.handle(require_actor(actor), order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.reference} picked up")


@click.command("return")
@click.argument("order_id", type=int)
@click.option("--returned-at", type=DATETIME, default=None, help="Defaults to now (UTC).")
@click.option("--late-fee-paid", default=None, help="Late fee amount paid at the counter.")
@click.pass_obj
def order_return(actor, order_id: int, returned_at, late_fee_paid) -> None:
    """Take the goods back and assess any late fee."""
    handler = ReturnOrderHandler(unit_of_work(), notifier(), late_fee_policy())

    try:
        result = handler.handle(
            require_actor(actor),
            order_id,
            returned_at=returned_at,
            late_fee_paid=late_fee_paid,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {result.order.reference} returned  (payment={result.order.payment_status})")
    if result.is_late:
        click.echo(f"Late fee charged: {result.late_fee}")
