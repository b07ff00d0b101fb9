"""Application service: Return Order use case (PICKEDUP -> RETURNED).

Computes the late fee against the latest agreed end, releases the
reservation (by leaving the reservation-holding statuses) and settles
the fee on the invoice, all in one unit of work.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

import structlog

from rentals.application.common import ensure_vendor_access, load_order, notify
from rentals.application.dto import ReturnDTO
from rentals.application.mapping import order_to_dto
from rentals.application.ports import NotificationEvent, Notifier
from rentals.domain.model.actor import Actor
from rentals.domain.model.value_objects import Money, as_utc
from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.domain.service import financial_calculator
from rentals.domain.service.financial_calculator import LateFeePolicy
from rentals.domain.service.settlement import reconcile_on_return
from rentals.domain.time_utils import utcnow

logger = structlog.get_logger(__name__)


class ReturnOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: Notifier,
        late_fee_policy: LateFeePolicy | None = None,
        clock: Callable = utcnow,
    ) -> None:
        self._uow = uow
        self._notifier = notifier
        self._policy = late_fee_policy or LateFeePolicy()
        self._clock = clock

    def handle(
        self,
        actor: Actor,
        order_id: int,
        returned_at: datetime | None = None,
        late_fee_paid: str | None = None,
    ) -> ReturnDTO:
        """Take the goods back.

        Args:
            returned_at: When the goods came back; defaults to now.
            late_fee_paid: Amount of the late fee paid at the counter.
        """
        returned_at = as_utc(returned_at) if returned_at else self._clock()
        paid_now = Money.of(late_fee_paid) if late_fee_paid else None

        with self._uow:
            order = load_order(self._uow, order_id)
            ensure_vendor_access(actor, order)

            fee = financial_calculator.late_fee(order, returned_at, self._policy)
            order.mark_returned(returned_at, fee)
            invoice = self._uow.invoices.get_by_order_id(order_id)
            reconcile_on_return(order, invoice, fee, paid_now)

            if invoice is not None:
                self._uow.invoices.save(invoice)
            self._uow.orders.save(order)
            self._uow.commit()

        is_late = not fee.is_zero
        logger.info(
            "order_returned",
            order_id=order.id,
            reference=order.reference,
            late_fee=str(fee),
            payment_status=order.payment_status.value,
        )
        dto = order_to_dto(order)
        notify(self._notifier, NotificationEvent.ORDER_RETURNED, dto)
        if is_late:
            notify(self._notifier, NotificationEvent.LATE_RETURN, dto)
        return ReturnDTO(order=dto, late_fee=str(fee), is_late=is_late)
