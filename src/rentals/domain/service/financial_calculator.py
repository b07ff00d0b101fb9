"""Domain service: Financial Calculator.

Pure functions over an order's lines and pricing parameters.  Nothing
here mutates its arguments, so every function is safe to call again.

Intermediate figures stay at full Decimal precision; only the final
total (or fee) is rounded half-up to cents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Mapping

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.value_objects import Money, RentalPeriod, RentalUnit, as_utc

if TYPE_CHECKING:
    from rentals.domain.model.order import Order, OrderLine

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class LateFeePolicy:
    """Overage rate table: multiplier applied to a line's per-unit rate.

    The default bills overage at exactly the agreed rental rate.
    """

    multipliers: Mapping[RentalUnit, Decimal] = field(
        default_factory=lambda: {unit: Decimal("1") for unit in RentalUnit}
    )

    def __post_init__(self) -> None:
        for unit, multiplier in self.multipliers.items():
            if not multiplier.is_finite():
                raise ValidationError(
                    f"Late fee multiplier for {unit.value} must be finite"
                )
            if multiplier < 0:
                raise ValidationError(
                    f"Late fee multiplier for {unit.value} cannot be negative"
                )

    def multiplier_for(self, unit: RentalUnit) -> Decimal:
        return self.multipliers.get(unit, Decimal("1"))


def subtotal(lines: Iterable[OrderLine]) -> Money:
    result = Money.zero()
    for line in lines:
        result = result + line.line_total
    return result


def tax_amount(amount: Money, tax_rate: Decimal) -> Money:
    return Money(amount.amount * tax_rate / HUNDRED, amount.currency)


def total(order: Order) -> Money:
    """``subtotal - discount + shipping + tax``, rounded once at the end."""
    sub = subtotal(order.lines)
    tax = tax_amount(sub, order.tax_rate)
    gross = sub.amount + order.shipping.amount + tax.amount
    if order.discount.amount > gross:
        raise ValidationError(
            f"Discount {order.discount} exceeds order value {Money(gross).rounded()}"
        )
    return Money(gross - order.discount.amount, sub.currency).rounded()


def late_fee(
    order: Order,
    returned_at: datetime,
    policy: LateFeePolicy | None = None,
) -> Money:
    """Fee owed for returning after the latest agreed end.

    Each line is billed ``late_units * rent_rate * multiplier * quantity``,
    where ``late_units`` counts started units of the line's rental unit.
    """
    policy = policy or LateFeePolicy()
    overage = as_utc(returned_at) - order.rental_end
    if overage.total_seconds() <= 0:
        return Money.zero()

    fee = Decimal("0")
    for line in order.lines:
        late_units = line.rent_unit.units_in(overage)
        fee += (
            line.rent_rate.amount
            * late_units
            * policy.multiplier_for(line.rent_unit)
            * line.quantity.value
        )
    return Money(fee).rounded()


def quote_unit_price(rent_price: Money, rent_unit: RentalUnit, period: RentalPeriod) -> Money:
    """Price of one unit for the whole window (partial units bill in full)."""
    return rent_price * rent_unit.units_in(period.duration)
