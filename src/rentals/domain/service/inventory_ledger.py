"""Domain service: Inventory Ledger.

Answers "how many units of a product are already committed during a
window?".  Nothing is counted or stored here: the committed quantity is
summed from the reservations of orders in a reservation-holding status
each time it is asked for.  Callers run it inside the unit of work that
will also write, so the answer cannot go stale before the write.
"""

from __future__ import annotations

from rentals.domain.exceptions import EntityNotFoundError
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import RentalPeriod
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.product_repository import ProductRepository


class InventoryLedger:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def product(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product '{product_id}' not found")
        return product

    def committed_quantity(
        self,
        product_id: str,
        period: RentalPeriod,
        exclude_order_id: int | None = None,
    ) -> int:
        reservations = self._order_repo.find_reservations(
            product_id, period, exclude_order_id=exclude_order_id
        )
        return sum(r.quantity for r in reservations)

    def available_quantity(
        self,
        product_id: str,
        period: RentalPeriod,
        exclude_order_id: int | None = None,
    ) -> int:
        product = self.product(product_id)
        committed = self.committed_quantity(product_id, period, exclude_order_id)
        return product.quantity_on_hand - committed
