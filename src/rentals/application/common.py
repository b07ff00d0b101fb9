"""Helpers shared by the application handlers."""

from __future__ import annotations

from typing import Any

import structlog

from rentals.application.ports import NotificationEvent, Notifier
from rentals.domain.exceptions import AuthorizationError, EntityNotFoundError
from rentals.domain.model.actor import Actor, Role
from rentals.domain.model.invoice import Invoice
from rentals.domain.model.order import Order
from rentals.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


def load_order(uow: UnitOfWork, order_id: int) -> Order:
    order = uow.orders.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order


def load_invoice(uow: UnitOfWork, invoice_id: int) -> Invoice:
    invoice = uow.invoices.get_by_id(invoice_id)
    if invoice is None:
        raise EntityNotFoundError(f"Invoice #{invoice_id} not found")
    return invoice


# --- Ownership ----------------------------------------------------------------


def ensure_vendor_access(actor: Actor, order: Order) -> None:
    """Lifecycle transitions: the owning vendor or an admin."""
    if actor.is_admin:
        return
    if actor.role is Role.VENDOR and actor.id == order.vendor_id:
        return
    raise AuthorizationError(
        f"{actor.role.value.lower()} '{actor.id}' is not authorized to manage "
        f"order {order.reference}"
    )


def ensure_party_access(actor: Actor, order: Order) -> None:
    """Cancelling and paying: either party to the order, or an admin."""
    if actor.is_admin:
        return
    if actor.role is Role.VENDOR and actor.id == order.vendor_id:
        return
    if actor.role is Role.CUSTOMER and actor.id == order.customer_id:
        return
    raise AuthorizationError(
        f"{actor.role.value.lower()} '{actor.id}' is not a party to "
        f"order {order.reference}"
    )


def ensure_admin(actor: Actor, action: str) -> None:
    if not actor.is_admin:
        raise AuthorizationError(f"Only an admin may {action}")


# --- Notifications ------------------------------------------------------------


def notify(notifier: Notifier, event: NotificationEvent, subject: Any) -> None:
    """Deliver a notification after commit; failures are logged, not raised."""
    try:
        notifier.notify(event, subject)
    except Exception:
        logger.warning("notification_failed", notification=event.value, exc_info=True)
