"""Domain service: Stock Reservation.

Coordinates the cross-aggregate part of confirming an order: the lines
are checked against every other order's reservations, and only when the
check passes may the order flip to CONFIRMED.  The reservation *is* the
status flip, so there is nothing to undo on failure; the caller's unit of
work simply never commits.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from rentals.domain.exceptions import StockConflictError
from rentals.domain.model.order import Order
from rentals.domain.model.reservation import StockConflict
from rentals.domain.service.conflict_detector import ConflictDetector
from rentals.domain.service.inventory_ledger import InventoryLedger

logger = structlog.get_logger(__name__)


class ReservationService:

    def __init__(self, ledger: InventoryLedger) -> None:
        self._detector = ConflictDetector(ledger)

    def conflicts_for(self, order: Order) -> list[StockConflict]:
        return self._detector.detect(
            order.reservation_requests(), exclude_order_id=order.id
        )

    def reserve_for_order(self, order: Order, at: datetime) -> None:
        """Confirm *order* if every line fits in the remaining stock.

        Raises StockConflictError with the full conflict list otherwise,
        leaving the order untouched.
        """
        order.check_confirmable()
        conflicts = self.conflicts_for(order)
        if conflicts:
            logger.warning(
                "stock_conflict",
                order_id=order.id,
                conflicts=[c.to_dict() for c in conflicts],
            )
            raise StockConflictError(conflicts)
        order.confirm(at)

    def reserve_with_override(
        self,
        order: Order,
        acknowledged: list[StockConflict],
        actor_id: str,
        at: datetime,
    ) -> None:
        """Confirm *order* despite conflicts the caller has acknowledged.

        The acknowledged list must match the conflicts detected right now,
        exactly and in order; anything else means the caller saw stale
        data, and the fresh conflicts are raised instead.  If the conflicts
        have cleared in the meantime the order is confirmed normally.
        """
        order.check_confirmable()
        conflicts = self.conflicts_for(order)
        if conflicts and conflicts != list(acknowledged):
            raise StockConflictError(conflicts)
        order.confirm(at)
        if conflicts:
            order.record_override(actor_id, conflicts, at)
            logger.warning(
                "stock_conflict_overridden",
                order_id=order.id,
                actor_id=actor_id,
                conflicts=[c.to_dict() for c in conflicts],
            )
