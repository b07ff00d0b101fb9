"""Application service: Approve Quotation use case (QUOTATION -> APPROVED).

Approval does not check availability; quotations may overlap until one
of them is confirmed.
"""

from __future__ import annotations

import structlog

from rentals.application.common import ensure_vendor_access, load_order, notify
from rentals.application.dto import OrderDTO
from rentals.application.mapping import order_to_dto
from rentals.application.ports import NotificationEvent, Notifier
from rentals.domain.model.actor import Actor
from rentals.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class ApproveOrderHandler:

    def __init__(self, uow: UnitOfWork, notifier: Notifier) -> None:
        self._uow = uow
        self._notifier = notifier

    def handle(self, actor: Actor, order_id: int) -> OrderDTO:
        with self._uow:
            order = load_order(self._uow, order_id)
            ensure_vendor_access(actor, order)
            order.approve()
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info("order_approved", order_id=order.id, reference=order.reference)
        dto = order_to_dto(order)
        notify(self._notifier, NotificationEvent.ORDER_APPROVED, dto)
        return dto
