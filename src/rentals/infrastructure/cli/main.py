import click

from rentals.domain.exceptions import DomainException
from rentals.domain.model.actor import Actor
from rentals.infrastructure import bootstrap
from rentals.infrastructure.cli.invoice_commands import (
    invoice_create,
    invoice_dispatch,
    invoice_pay,
    invoice_refresh,
    invoice_show,
)
from rentals.infrastructure.cli.order_commands import (
    order_approve,
    order_cancel,
    order_confirm,
    order_pickup,
    order_quote,
    order_reject,
    order_return,
    order_send,
    order_show,
)
from rentals.infrastructure.cli.product_commands import (
    product_add,
    product_availability,
    product_list,
    product_price,
)
from rentals.infrastructure.log_config import configure_logging


@click.group()
@click.option(
    "--actor",
    "actor_spec",
    envvar="RENTALS_ACTOR",
    default=None,
    help="Acting identity as ROLE:ID (e.g. vendor:v1, admin:root).",
)
@click.pass_context
def cli(ctx: click.Context, actor_spec: str | None) -> None:
    """Rentals: rental order lifecycle and stock reservations."""
    try:
        settings = bootstrap.settings()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    configure_logging(settings.log_level, settings.log_json)

    actor = None
    if actor_spec:
        try:
            actor = Actor.parse(actor_spec)
        except DomainException as exc:
            raise click.BadParameter(str(exc), param_hint="--actor")
    ctx.obj = actor


@cli.group()
def order() -> None:
    """Manage rental orders."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def invoice() -> None:
    """Manage invoices and payments."""


# Register subcommands
order.add_command(order_approve)
order.add_command(order_cancel)
order.add_command(order_confirm)
order.add_command(order_pickup)
order.add_command(order_quote)
order.add_command(order_reject)
order.add_command(order_return)
order.add_command(order_send)
order.add_command(order_show)
product.add_command(product_add)
product.add_command(product_availability)
product.add_command(product_list)
product.add_command(product_price)
invoice.add_command(invoice_create)
invoice.add_command(invoice_dispatch)
invoice.add_command(invoice_pay)
invoice.add_command(invoice_refresh)
invoice.add_command(invoice_show)
