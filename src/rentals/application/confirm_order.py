"""Application service: Confirm Order use case.

Orchestrates the domain service (conflict check + reservation) and the
Order aggregate (state transition) inside one unit of work.  The
availability read and the CONFIRMED write are never split across
transactions, so two overlapping confirms cannot both succeed past stock.

On conflict nothing is committed and the order stays APPROVED; the
caller gets every conflicting line and may retry after adjusting the
order, or an admin may override with ``ConfirmWithOverrideHandler``.
"""

from __future__ import annotations

from typing import Callable

import structlog

from rentals.application.common import (
    ensure_admin,
    ensure_vendor_access,
    load_order,
    notify,
)
from rentals.application.dto import OrderDTO
from rentals.application.mapping import order_to_dto
from rentals.application.ports import NotificationEvent, Notifier
from rentals.domain.model.actor import Actor
from rentals.domain.model.reservation import StockConflict
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service.inventory_ledger import InventoryLedger
from rentals.domain.service.reservation_service import ReservationService
from rentals.domain.time_utils import utcnow

logger = structlog.get_logger(__name__)


class ConfirmOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: Notifier,
        clock: Callable = utcnow,
    ) -> None:
        self._uow = uow
        self._notifier = notifier
        self._clock = clock

    def handle(self, actor: Actor, order_id: int) -> OrderDTO:
        with self._uow:
            order = load_order(self._uow, order_id)
            ensure_vendor_access(actor, order)

            # Reserve and transition together; raises StockConflictError
            svc = ReservationService(InventoryLedger(self._uow.orders, self._uow.products))
            svc.reserve_for_order(order, self._clock())

            self._uow.orders.save(order)
            self._uow.commit()

        logger.info("order_confirmed", order_id=order.id, reference=order.reference)
        dto = order_to_dto(order)
        notify(self._notifier, NotificationEvent.ORDER_CONFIRMED, dto)
        return dto


class ConfirmWithOverrideHandler:
    """Admin-only confirmation past known conflicts.

    The caller must echo back exactly the conflicts it was shown.  If the
    stock picture has changed since, the fresh conflicts are raised and
    nothing is committed.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: Notifier,
        clock: Callable = utcnow,
    ) -> None:
        self._uow = uow
        self._notifier = notifier
        self._clock = clock

    def handle(
        self,
        actor: Actor,
        order_id: int,
        acknowledged_conflicts: list[StockConflict],
    ) -> OrderDTO:
        ensure_admin(actor, "override a stock conflict")

        with self._uow:
            order = load_order(self._uow, order_id)
            svc = ReservationService(InventoryLedger(self._uow.orders, self._uow.products))
            svc.reserve_with_override(
                order, acknowledged_conflicts, actor.id, self._clock()
            )
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "order_confirmed",
            order_id=order.id,
            reference=order.reference,
            overridden=len(acknowledged_conflicts),
        )
        dto = order_to_dto(order)
        notify(self._notifier, NotificationEvent.ORDER_CONFIRMED, dto)
        return dto
