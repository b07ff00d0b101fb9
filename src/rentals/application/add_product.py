"""Application service: Add Product use case."""

from __future__ import annotations

import structlog

from rentals.application.dto import ProductDTO
from rentals.application.mapping import product_to_dto
from rentals.domain.exceptions import AuthorizationError, ValidationError
from rentals.domain.model.actor import Actor, Role
from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money, RentalUnit
from rentals.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        actor: Actor,
        name: str,
        quantity_on_hand: int,
        rent_price: str,
        rent_unit: str = "DAY",
        vendor_id: str | None = None,
    ) -> ProductDTO:
        """List a new rentable product.

        Vendors list products under their own ID; an admin must say which
        vendor the product belongs to.
        """
        if actor.role is Role.CUSTOMER:
            raise AuthorizationError("Customers cannot list products")
        owner = actor.id if actor.role is Role.VENDOR else vendor_id
        if not owner:
            raise ValidationError("Vendor is required")

        try:
            unit = RentalUnit(rent_unit.upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown rental unit '{rent_unit}'") from exc

        with self._uow:
            product = Product.create(
                id=self._uow.products.next_id(),
                vendor_id=owner,
                name=name,
                quantity_on_hand=quantity_on_hand,
                rent_price=Money.of(rent_price),
                rent_unit=unit,
            )
            self._uow.products.save(product)
            self._uow.commit()

        logger.info("product_added", product_id=product.id, vendor_id=owner)
        return product_to_dto(product)


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, vendor_id: str | None = None) -> list[ProductDTO]:
        with self._uow:
            products = self._uow.products.list_all()
        return [
            product_to_dto(p)
            for p in products
            if vendor_id is None or p.vendor_id == vendor_id
        ]
