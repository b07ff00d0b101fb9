"""Application service: Create Quotation use case.

Resolves the requested products, locks their current price and tariff
into the lines, and stores a new QUOTATION.  No stock is checked or
claimed here: quotations may overlap freely until one is confirmed.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Callable

import structlog

from rentals.application.dto import OrderDTO, OrderLineSpec
from rentals.application.mapping import order_to_dto
from rentals.domain.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    ValidationError,
)
from rentals.domain.model.actor import Actor, Role
from rentals.domain.model.order import Order, OrderLine
from rentals.domain.model.value_objects import Money, Quantity, RentalPeriod
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.financial_calculator import quote_unit_price
from rentals.domain.time_utils import utcnow

logger = structlog.get_logger(__name__)


class CreateQuotationHandler:

    def __init__(self, uow: UnitOfWork, clock: Callable = utcnow) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        actor: Actor,
        customer_id: str,
        line_specs: list[OrderLineSpec],
        discount: str = "0",
        shipping: str = "0",
        tax_rate: str = "0",
        down_payment: str = "0",
    ) -> OrderDTO:
        """Create a rental quotation.

        Steps:
        1. Resolve each product ID to a Product (fail if not found).
        2. Build OrderLines with *current* prices (snapshot).
        3. Require every product to belong to one vendor.
        4. Let the Order aggregate validate all business rules.
        5. Persist and return a DTO.
        """
        if not line_specs:
            raise ValidationError("Order must contain at least one line")
        if actor.role is Role.CUSTOMER and actor.id != customer_id:
            raise AuthorizationError("Customers may only request quotations for themselves")

        with self._uow:
            lines: list[OrderLine] = []
            vendor_ids: set[str] = set()

            for spec in line_specs:
                product = self._uow.products.get_by_id(spec.product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product '{spec.product_id}' not found")

                period = RentalPeriod(spec.start, spec.end)
                vendor_ids.add(product.vendor_id)
                lines.append(
                    OrderLine(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=Quantity(spec.quantity),
                        unit_price=quote_unit_price(  # <-- price snapshot
                            product.rent_price, product.rent_unit, period
                        ),
                        period=period,
                        rent_rate=product.rent_price,
                        rent_unit=product.rent_unit,
                    )
                )

            if len(vendor_ids) > 1:
                raise ValidationError("All products in one order must belong to one vendor")
            vendor_id = next(iter(vendor_ids), "")

            if actor.role is Role.VENDOR and actor.id != vendor_id:
                raise AuthorizationError(
                    f"vendor '{actor.id}' cannot quote products of another vendor"
                )

            order = Order.create(
                reference=self._uow.orders.next_reference(),
                customer_id=customer_id,
                vendor_id=vendor_id,
                lines=lines,
                discount=Money.of(discount),
                shipping=Money.of(shipping),
                tax_rate=_parse_rate(tax_rate),
                down_payment=Money.of(down_payment),
            )
            order.created_at = self._clock()
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "quotation_created",
            order_id=order.id,
            reference=order.reference,
            total=str(order.total_amount),
        )
        return order_to_dto(order)


def _parse_rate(raw: str) -> Decimal:
    try:
        rate = Decimal(str(raw))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid tax rate: {raw!r}") from exc
    if not rate.is_finite():
        raise ValidationError(f"Invalid tax rate: {raw!r}")
    return rate
