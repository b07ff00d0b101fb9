"""Domain service: Conflict Detector.

Validates candidate order lines against the Inventory Ledger before a
reservation is committed.  Lines are checked in the order given and every
shortfall is reported, not just the first.

Earlier lines of the same request that claim the same product over an
overlapping window count against later ones, so one order cannot overbook
a product by splitting it across lines.
"""

from __future__ import annotations

from rentals.domain.model.reservation import ReservationRequest, StockConflict
from rentals.domain.service.inventory_ledger import InventoryLedger


class ConflictDetector:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._ledger = ledger

    def detect(
        self,
        requests: list[ReservationRequest],
        exclude_order_id: int | None = None,
    ) -> list[StockConflict]:
        """Return the conflicts committing *requests* would cause.

        *exclude_order_id* is the order being evaluated: its own existing
        reservations never count against it.
        """
        conflicts: list[StockConflict] = []
        claimed: list[ReservationRequest] = []

        for request in requests:
            product = self._ledger.product(request.product_id)
            available = self._ledger.available_quantity(
                request.product_id, request.period, exclude_order_id
            )
            available -= sum(
                earlier.quantity.value
                for earlier in claimed
                if earlier.product_id == request.product_id
                and earlier.period.overlaps(request.period)
            )
            requested = request.quantity.value
            if requested > available:
                conflicts.append(
                    StockConflict(
                        product_id=request.product_id,
                        product_name=product.name,
                        requested_qty=requested,
                        available_qty=max(0, available),
                        start=request.period.start,
                        end=request.period.end,
                    )
                )
            claimed.append(request)

        return conflicts
