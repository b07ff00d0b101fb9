"""Collaborators the engine consumes but does not implement.

Notification delivery and the payment provider sit outside the core.
Handlers call them only after their unit of work has committed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from rentals.domain.model.order import PaymentStatus


class NotificationEvent(Enum):
    QUOTATION_SENT = "quotation_sent"
    ORDER_APPROVED = "order_approved"
    ORDER_REJECTED = "order_rejected"
    ORDER_CONFIRMED = "order_confirmed"
    ORDER_CANCELLED = "order_cancelled"
    INVOICE_DISPATCHED = "invoice_dispatched"
    ORDER_PICKED_UP = "order_picked_up"
    ORDER_RETURNED = "order_returned"
    LATE_RETURN = "late_return"


class Notifier(ABC):

    @abstractmethod
    def notify(self, event: NotificationEvent, subject: Any) -> None:
        """Tell the customer (or vendor) about *event*; fire and forget."""


class PaymentGateway(ABC):

    @abstractmethod
    def generate_payment_reference(self, invoice_id: int) -> str:
        """Return a stable, unguessable token bound to the invoice."""

    @abstractmethod
    def query_payment_status(self, invoice_id: int) -> PaymentStatus:
        """Ask the provider how much of the invoice has been paid."""
