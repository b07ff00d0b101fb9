"""Product aggregate.

Products live independently of orders. Vendors list them with a stock
level and a price per rental unit; the reservation engine only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.value_objects import Money, RentalUnit


@dataclass
class Product:
    """A rentable product in a vendor's catalog.

    ``quantity_on_hand`` is the number of physical units the vendor owns,
    not a live counter: availability for a window is always derived from
    the orders holding reservations.
    """

    id: str
    vendor_id: str
    name: str
    quantity_on_hand: int
    rent_price: Money
    rent_unit: RentalUnit = RentalUnit.DAY

    @staticmethod
    def create(
        id: str,
        vendor_id: str,
        name: str,
        quantity_on_hand: int,
        rent_price: Money,
        rent_unit: RentalUnit = RentalUnit.DAY,
    ) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not vendor_id:
            raise ValidationError("Product must belong to a vendor")
        if isinstance(quantity_on_hand, bool) or not isinstance(quantity_on_hand, int):
            raise ValidationError("Quantity on hand must be an integer")
        if quantity_on_hand < 0:
            raise ValidationError("Quantity on hand cannot be negative")
        if rent_price.is_zero:
            raise ValidationError("Rent price must be greater than zero")
        return Product(
            id=id,
            vendor_id=vendor_id,
            name=name.strip(),
            quantity_on_hand=quantity_on_hand,
            rent_price=rent_price,
            rent_unit=rent_unit,
        )

    def update_price(self, new_price: Money) -> None:
        """Change the rent price.

        This does NOT affect any existing orders because order lines
        capture a price snapshot at quotation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Rent price must be greater than zero")
        self.rent_price = new_price
