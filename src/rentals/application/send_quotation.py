"""Application service: Send Quotation use case.

Marks the quotation as sent and tells the customer.  The order stays in
QUOTATION and no stock is touched.
"""

from __future__ import annotations

from typing import Callable

import structlog

from rentals.application.common import ensure_vendor_access, load_order, notify
from rentals.application.dto import OrderDTO
from rentals.application.mapping import order_to_dto
from rentals.application.ports import NotificationEvent, Notifier
from rentals.domain.model.actor import Actor
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.time_utils import utcnow

logger = structlog.get_logger(__name__)


class SendQuotationHandler:

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
            order.mark_sent(self._clock())
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info("quotation_sent", order_id=order.id, reference=order.reference)
        dto = order_to_dto(order)
        notify(self._notifier, NotificationEvent.QUOTATION_SENT, dto)
        return dto
