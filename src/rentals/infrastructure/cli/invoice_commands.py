"""CLI commands for invoices and payments."""

from __future__ import annotations

import click

from rentals.application.create_invoice import CreateInvoiceHandler
from rentals.application.dispatch_invoice import DispatchInvoiceHandler
from rentals.application.dto import InvoiceDTO
from rentals.application.record_payment import (
    RecordPaymentHandler,
    RefreshPaymentStatusHandler,
)
from rentals.application.show_order import ShowInvoiceHandler
from rentals.domain.exceptions import DomainException
from rentals.infrastructure.bootstrap import (
    notifier,
    payment_base_url,
    payment_gateway,
    unit_of_work,
)
from rentals.infrastructure.cli.common import require_actor


def _display_invoice(dto: InvoiceDTO) -> None:
    click.echo(f"Invoice {dto.number}  (id={dto.id}, order #{dto.order_id})")
    click.echo(f"  Amount due:  {dto.amount_due:>12}")
    click.echo(f"  Amount paid: {dto.amount_paid:>12}")
    click.echo(f"  Balance:     {dto.balance:>12}")
    click.echo(f"  Status:      {dto.payment_status:>12}")
    if dto.sent_at:
        click.echo(f"  Sent:        {dto.sent_at}")
    if dto.payment_link:
        click.echo(f"  Pay at:      {dto.payment_link}")


@click.command("create")
@click.argument("order_id", type=int)
@click.pass_obj
def invoice_create(actor, order_id: int) -> None:
    """Issue the invoice for a confirmed order."""
    handler = CreateInvoiceHandler(unit_of_work())

    try:
        dto = handler.handle(require_actor(actor), order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("dispatch")
@click.argument("invoice_id", type=int)
@click.pass_obj
def invoice_dispatch(actor, invoice_id: int) -> None:
    """Send an invoice to the customer with a payment link."""
    handler = DispatchInvoiceHandler(
        unit_of_work(), payment_gateway(), notifier(), payment_base_url()
    )

    try:
        dto = handler.handle(require_actor(actor), invoice_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("pay")
@click.argument("invoice_id", type=int)
@click.argument("amount")
@click.pass_obj
def invoice_pay(actor, invoice_id: int, amount: str) -> None:
    """Record a payment against an invoice."""
    handler = RecordPaymentHandler(unit_of_work())

    try:
        dto = handler.handle(require_actor(actor), invoice_id, amount)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("refresh")
@click.argument("invoice_id", type=int)
@click.pass_obj
def invoice_refresh(actor, invoice_id: int) -> None:
    """Sync an invoice with the payment provider."""
    handler = RefreshPaymentStatusHandler(unit_of_work(), payment_gateway())

    try:
        dto = handler.handle(require_actor(actor), invoice_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("show")
@click.argument("invoice_id", type=int, required=False)
@click.option("--order", "order_id", type=int, default=None, help="Look up by order instead.")
def invoice_show(invoice_id, order_id) -> None:
    """Display an invoice."""
    if invoice_id is None and order_id is None:
        raise click.UsageError("Give an INVOICE_ID or --order ORDER_ID")
    handler = ShowInvoiceHandler(unit_of_work(), payment_base_url())

    try:
        dto = handler.handle(invoice_id=invoice_id, order_id=order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)
