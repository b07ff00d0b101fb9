"""Application service: Cancel Order use case.

QUOTATION and APPROVED orders hold no stock.  A CONFIRMED order's
reservation is released by the status change itself: the ledger only
counts orders in a reservation-holding status.
"""

from __future__ import annotations

import structlog

from rentals.application.common import ensure_party_access, load_order, notify
from rentals.application.dto import OrderDTO
from rentals.application.mapping import order_to_dto
from rentals.application.ports import NotificationEvent, Notifier
from rentals.domain.model.actor import Actor
from rentals.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(self, uow: UnitOfWork, notifier: Notifier) -> None:
        self._uow = uow
        self._notifier = notifier

    def handle(self, actor: Actor, order_id: int) -> OrderDTO:
        with self._uow:
            order = load_order(self._uow, order_id)
            ensure_party_access(actor, order)
            released = order.holds_reservation
            order.cancel()
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "order_cancelled",
            order_id=order.id,
            reference=order.reference,
            reservation_released=released,
        )
        dto = order_to_dto(order)
        notify(self._notifier, NotificationEvent.ORDER_CANCELLED, dto)
        return dto
