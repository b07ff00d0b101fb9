"""Order aggregate — the rental order state machine.

The Order is an aggregate root that owns its lines.  Every status change
goes through ``_transition`` which consults ``ALLOWED_TRANSITIONS``; the
table has an entry for every status, so a new status cannot be added
without deciding where it may go.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from rentals.domain.exceptions import (
    InvalidTransitionError,
    PaymentRequiredError,
    ValidationError,
)
from rentals.domain.model.reservation import (
    Reservation,
    ReservationRequest,
    StockConflict,
)
from rentals.domain.model.value_objects import Money, Quantity, RentalPeriod, RentalUnit
from rentals.domain.service import financial_calculator
from rentals.domain.time_utils import utcnow


class OrderStatus(Enum):
    QUOTATION = "QUOTATION"
    APPROVED = "APPROVED"
    CONFIRMED = "CONFIRMED"
    INVOICED = "INVOICED"
    PICKEDUP = "PICKEDUP"
    RETURNED = "RETURNED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

    @property
    def holds_reservation(self) -> bool:
        return self in RESERVATION_STATUSES


class PaymentStatus(Enum):
    UNPAID = "UNPAID"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


RESERVATION_STATUSES = frozenset(
    {OrderStatus.CONFIRMED, OrderStatus.INVOICED, OrderStatus.PICKEDUP}
)

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.QUOTATION: frozenset(
        {OrderStatus.APPROVED, OrderStatus.REJECTED, OrderStatus.CANCELLED}
    ),
    OrderStatus.APPROVED: frozenset(
        {OrderStatus.CONFIRMED, OrderStatus.REJECTED, OrderStatus.CANCELLED}
    ),
    OrderStatus.CONFIRMED: frozenset(
        {OrderStatus.INVOICED, OrderStatus.PICKEDUP, OrderStatus.CANCELLED}
    ),
    OrderStatus.INVOICED: frozenset({OrderStatus.PICKEDUP}),
    OrderStatus.PICKEDUP: frozenset({OrderStatus.RETURNED}),
    OrderStatus.RETURNED: frozenset(),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass
class OrderLine:
    """One product rented for one window.

    ``unit_price`` is the price of a single unit for the whole window,
    locked at quotation time.  ``rent_rate`` and ``rent_unit`` snapshot the
    product's per-unit tariff so late fees are billed at the agreed rate.
    """

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at quotation time
    period: RentalPeriod
    rent_rate: Money
    rent_unit: RentalUnit = RentalUnit.DAY

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    def as_request(self) -> ReservationRequest:
        return ReservationRequest(
            product_id=self.product_id,
            quantity=self.quantity,
            period=self.period,
        )


@dataclass(frozen=True)
class OverrideRecord:
    """Audit entry for a confirmation that knowingly exceeded stock."""

    actor_id: str
    at: datetime
    conflicts: tuple[StockConflict, ...]


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_ORDER_LINES = 50


@dataclass
class Order:
    """Aggregate root for rental orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    reference: str
    customer_id: str
    vendor_id: str
    lines: list[OrderLine]
    status: OrderStatus = OrderStatus.QUOTATION
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    discount: Money = field(default_factory=Money.zero)
    shipping: Money = field(default_factory=Money.zero)
    tax_rate: Decimal = Decimal("0")
    down_payment: Money = field(default_factory=Money.zero)
    total_amount: Money = field(default_factory=Money.zero)
    late_fee: Money = field(default_factory=Money.zero)
    rejection_reason: str | None = None
    override_log: list[OverrideRecord] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    sent_at: datetime | None = None
    confirmed_at: datetime | None = None
    picked_up_at: datetime | None = None
    returned_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        reference: str,
        customer_id: str,
        vendor_id: str,
        lines: list[OrderLine],
        discount: Money | None = None,
        shipping: Money | None = None,
        tax_rate: Decimal = Decimal("0"),
        down_payment: Money | None = None,
    ) -> Order:
        """Create a new quotation, enforcing all invariants."""
        if not customer_id or not customer_id.strip():
            raise ValidationError("Customer is required")
        if not vendor_id:
            raise ValidationError("Vendor is required")
        if not lines:
            raise ValidationError("Order must contain at least one line")
        if len(lines) > MAX_ORDER_LINES:
            raise ValidationError(f"Maximum {MAX_ORDER_LINES} lines per order")
        if not Decimal("0") <= tax_rate <= Decimal("100"):
            raise ValidationError(f"Tax rate must be between 0 and 100, got {tax_rate}")

        order = Order(
            id=None,
            reference=reference,
            customer_id=customer_id.strip(),
            vendor_id=vendor_id,
            lines=list(lines),
            discount=discount or Money.zero(),
            shipping=shipping or Money.zero(),
            tax_rate=tax_rate,
            down_payment=down_payment or Money.zero(),
        )
        order.total_amount = financial_calculator.total(order)

        if order.down_payment > order.total_amount:
            raise ValidationError(
                f"Down payment {order.down_payment} exceeds order total {order.total_amount}"
            )
        return order

    # --- State transitions ----------------------------------------------------

    def mark_sent(self, at: datetime) -> None:
        """Record that the quotation went out; the status does not move."""
        if self.status is not OrderStatus.QUOTATION:
            raise InvalidTransitionError(
                "send", self.status.value, [OrderStatus.QUOTATION.value]
            )
        self.sent_at = at

    def approve(self) -> None:
        self._transition(OrderStatus.APPROVED, "approve")

    def reject(self, reason: str) -> None:
        if not reason or not reason.strip():
            raise ValidationError("A reason is required to reject a quotation")
        self._transition(OrderStatus.REJECTED, "reject")
        self.rejection_reason = reason.strip()

    def check_confirmable(self) -> None:
        self._check_transition(OrderStatus.CONFIRMED, "confirm")

    def confirm(self, at: datetime) -> None:
        """Transition APPROVED -> CONFIRMED.

        The conflict check must pass in the same unit of work before this
        is called; from here on the lines count as reservations.

        The down payment is what has been paid so far, so a fully prepaid
        order can be picked up without waiting for its invoice.
        """
        self._transition(OrderStatus.CONFIRMED, "confirm")
        self.confirmed_at = at
        if self.down_payment >= self.total_amount:
            self.payment_status = PaymentStatus.PAID
        elif not self.down_payment.is_zero:
            self.payment_status = PaymentStatus.PARTIAL

    def record_override(
        self, actor_id: str, conflicts: list[StockConflict], at: datetime
    ) -> None:
        self.override_log.append(
            OverrideRecord(actor_id=actor_id, at=at, conflicts=tuple(conflicts))
        )

    def mark_invoiced(self) -> None:
        self._transition(OrderStatus.INVOICED, "invoice")

    def pickup(self, at: datetime) -> None:
        """Hand the goods out; gated on full payment."""
        self._check_transition(OrderStatus.PICKEDUP, "pick up")
        if self.payment_status is not PaymentStatus.PAID:
            raise PaymentRequiredError(self.payment_status.value)
        self.status = OrderStatus.PICKEDUP
        self.picked_up_at = at

    def mark_returned(self, at: datetime, late_fee: Money) -> None:
        """Transition PICKEDUP -> RETURNED; the reservation is released."""
        self._transition(OrderStatus.RETURNED, "return")
        self.returned_at = at
        self.late_fee = late_fee

    def cancel(self) -> None:
        """Cancel before pickup; a CONFIRMED order releases its reservation."""
        self._transition(OrderStatus.CANCELLED, "cancel")

    # --- Computed properties --------------------------------------------------

    @property
    def rental_end(self) -> datetime:
        """Latest agreed end across all lines."""
        return max(line.period.end for line in self.lines)

    @property
    def holds_reservation(self) -> bool:
        return self.status.holds_reservation

    def reservation_requests(self) -> list[ReservationRequest]:
        return [line.as_request() for line in self.lines]

    def reservations(self) -> list[Reservation]:
        """Active claims on stock; empty unless the status holds them."""
        if not self.holds_reservation or self.id is None:
            return []
        return [
            Reservation(
                order_id=self.id,
                product_id=line.product_id,
                quantity=line.quantity.value,
                period=line.period,
            )
            for line in self.lines
        ]

    # --- Internal helpers -----------------------------------------------------

    def _check_transition(self, target: OrderStatus, action: str) -> None:
        if target not in ALLOWED_TRANSITIONS[self.status]:
            required = [
                source.value
                for source, targets in ALLOWED_TRANSITIONS.items()
                if target in targets
            ]
            raise InvalidTransitionError(action, self.status.value, required)

    def _transition(self, target: OrderStatus, action: str) -> None:
        self._check_transition(target, action)
        self.status = target
