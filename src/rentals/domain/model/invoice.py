"""Invoice aggregate: what the customer owes for one order.

An order has at most one invoice.  The payment status is derived from
``amount_paid`` against ``amount_due`` rather than stored, so the two can
never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.order import PaymentStatus
from rentals.domain.model.value_objects import Money
from rentals.domain.time_utils import utcnow


@dataclass
class Invoice:

    id: int | None
    order_id: int
    number: str
    amount_due: Money
    amount_paid: Money = field(default_factory=Money.zero)
    sent_at: datetime | None = None  # None means drafted, not dispatched
    payment_token: str | None = None
    created_at: datetime = field(default_factory=utcnow)

    @property
    def balance(self) -> Money:
        if self.amount_paid >= self.amount_due:
            return Money.zero()
        return self.amount_due - self.amount_paid

    @property
    def payment_status(self) -> PaymentStatus:
        if self.amount_paid >= self.amount_due:
            return PaymentStatus.PAID
        if self.amount_paid.is_zero:
            return PaymentStatus.UNPAID
        return PaymentStatus.PARTIAL

    @property
    def is_dispatched(self) -> bool:
        return self.sent_at is not None

    def dispatch(self, payment_token: str, at: datetime) -> None:
        """Mark as sent with a fresh payment token.

        Re-dispatching replaces the token; the invoice itself is unchanged.
        """
        if not payment_token:
            raise ValidationError("Payment token is required to dispatch an invoice")
        self.payment_token = payment_token
        self.sent_at = at

    def record_payment(self, amount: Money) -> None:
        if amount.is_zero:
            raise ValidationError("Payment amount must be positive")
        if amount > self.balance:
            raise ValidationError(
                f"Payment {amount} exceeds outstanding balance {self.balance}"
            )
        self.amount_paid = self.amount_paid + amount

    def add_charge(self, amount: Money) -> None:
        """Increase what is owed (e.g. a late fee assessed at return)."""
        self.amount_due = self.amount_due + amount
