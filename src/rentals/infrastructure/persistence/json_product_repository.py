"""JSON-document-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from rentals.domain.model.product import Product
from rentals.domain.model.value_objects import Money, RentalUnit
from rentals.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):
    """Works on the ``products`` collection of an open JSON unit of work."""

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> str:
        if not self._records:
            return "1"
        return str(max(int(p["id"]) for p in self._records) + 1)

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._records:
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, product: Product) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == product.id:
                self._records[i] = self._to_raw(product)
                return
        self._records.append(self._to_raw(product))

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "vendor_id": product.vendor_id,
            "name": product.name,
            "quantity_on_hand": product.quantity_on_hand,
            "rent_price": str(product.rent_price.amount),
            "rent_unit": product.rent_unit.value,
            "currency": product.rent_price.currency,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            vendor_id=raw["vendor_id"],
            name=raw["name"],
            quantity_on_hand=raw["quantity_on_hand"],
            rent_price=Money(Decimal(raw["rent_price"]), raw.get("currency", "USD")),
            rent_unit=RentalUnit(raw["rent_unit"]),
        )
