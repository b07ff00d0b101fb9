"""Application service: Update Product use case."""

from __future__ import annotations

from rentals.domain.exceptions import AuthorizationError, EntityNotFoundError
from rentals.domain.model.actor import Actor
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.unit_of_work import UnitOfWork


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: Actor, product_id: str, new_price: str) -> None:
        """Update a product's rent price.

        This does NOT affect any existing orders; their lines captured a
        price snapshot at quotation time.
        """
        with self._uow:
            product = self._uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
            if not actor.is_admin and actor.id != product.vendor_id:
                raise AuthorizationError(f"'{actor.id}' does not own product '{product_id}'")

            product.update_price(Money.of(new_price))
            self._uow.products.save(product)
            self._uow.commit()
