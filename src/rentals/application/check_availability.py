"""Application service: Check Availability query.

Non-binding: the answer is for display only.  Stock is claimed solely by
confirming an order.
"""

from __future__ import annotations

from datetime import datetime

from rentals.application.dto import AvailabilityDTO
from rentals.domain.model.value_objects import RentalPeriod
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.inventory_ledger import InventoryLedger


class CheckAvailabilityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str, start: datetime, end: datetime) -> AvailabilityDTO:
        period = RentalPeriod(start, end)
        with self._uow:
            ledger = InventoryLedger(self._uow.orders, self._uow.products)
            product = ledger.product(product_id)
            committed = ledger.committed_quantity(product_id, period)

        return AvailabilityDTO(
            product_id=product.id,
            product_name=product.name,
            quantity_on_hand=product.quantity_on_hand,
            committed=committed,
            available=product.quantity_on_hand - committed,
            start=period.start.isoformat(),
            end=period.end.isoformat(),
        )
