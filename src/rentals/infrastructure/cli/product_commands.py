"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from rentals.application.add_product import AddProductHandler, ListProductsHandler
from rentals.application.check_availability import CheckAvailabilityHandler
from rentals.application.update_product import UpdateProductHandler
from rentals.domain.exceptions import DomainException
from rentals.domain.model.value_objects import RentalUnit
from rentals.infrastructure.bootstrap import unit_of_work
from rentals.infrastructure.cli.common import DATETIME, require_actor


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Units on hand.")
@click.option("--price", required=True, help="Rent price per unit of time (e.g. 10.00).")
@click.option(
    "--unit",
    type=click.Choice([u.value for u in RentalUnit], case_sensitive=False),
    default="DAY",
    show_default=True,
    help="Rental unit the price applies to.",
)
@click.option("--vendor", default=None, help="Owning vendor (admins only).")
@click.pass_obj
def product_add(actor, name: str, quantity: int, price: str, unit: str, vendor) -> None:
    """Add a rentable product to the catalog."""
    handler = AddProductHandler(unit_of_work())

    try:
        dto = handler.handle(
            require_actor(actor),
            name=name,
            quantity_on_hand=quantity,
            rent_price=price,
            rent_unit=unit.upper(),
            vendor_id=vendor,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product '{dto.name}' added  (id={dto.id}, {dto.rent_price}/{dto.rent_unit})")


@click.command("list")
@click.option("--vendor", default=None, help="Only this vendor's products.")
def product_list(vendor) -> None:
    """List all products."""
    dtos = ListProductsHandler(unit_of_work()).handle(vendor_id=vendor)

    if not dtos:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Vendor':<10} {'On hand':>8} {'Price':>10} {'Unit':>6}")
    click.echo("-" * 65)
    for p in dtos:
        click.echo(
            f"{p.id:<6} {p.name:<20} {p.vendor_id:<10} {p.quantity_on_hand:>8} "
            f"{p.rent_price:>10} {p.rent_unit:>6}"
        )


@click.command("price")
@click.argument("product_id")
@click.argument("new_price")
@click.pass_obj
def product_price(actor, product_id: str, new_price: str) -> None:
    """Change a product's rent price (existing orders keep theirs)."""
    handler = UpdateProductHandler(unit_of_work())

    try:
        handler.handle(require_actor(actor), product_id, new_price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} price updated to {new_price}")


@click.command("availability")
@click.argument("product_id")
@click.option("--start", required=True, type=DATETIME)
@click.option("--end", required=True, type=DATETIME)
def product_availability(product_id: str, start, end) -> None:
    """Show how many units are free over a window."""
    handler = CheckAvailabilityHandler(unit_of_work())

    try:
        dto = handler.handle(product_id, start, end)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{dto.product_name}  {dto.start} -> {dto.end}")
    click.echo(f"  On hand:   {dto.quantity_on_hand}")
    click.echo(f"  Committed: {dto.committed}")
    click.echo(f"  Available: {dto.available}")
