"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class OrderLineSpec:
    """Input: one product the customer wants, for one window."""

    product_id: str
    quantity: int
    start: datetime
    end: datetime


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single order line as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    start: str
    end: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    reference: str
    customer_id: str
    vendor_id: str
    status: str
    payment_status: str
    lines: list[OrderLineDTO]
    subtotal: str
    discount: str
    shipping: str
    tax: str
    total: str
    late_fee: str
    rejection_reason: str | None
    created_at: str
    sent_at: str | None


@dataclass(frozen=True)
class InvoiceDTO:
    id: int
    order_id: int
    number: str
    amount_due: str
    amount_paid: str
    balance: str
    payment_status: str
    sent_at: str | None
    payment_link: str | None


@dataclass(frozen=True)
class ReturnDTO:
    order: OrderDTO
    late_fee: str
    is_late: bool


@dataclass(frozen=True)
class AvailabilityDTO:
    product_id: str
    product_name: str
    quantity_on_hand: int
    committed: int
    available: int
    start: str
    end: str


@dataclass(frozen=True)
class ProductDTO:
    id: str
    vendor_id: str
    name: str
    quantity_on_hand: int
    rent_price: str
    rent_unit: str
