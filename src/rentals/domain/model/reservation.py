"""Reservation read models.

A reservation is never stored on its own: it is the claim an order holds
on a product while the order is in a reservation-holding status.  These
types carry that claim, a request for a new claim, and the shortfall
reported when a request cannot be met.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rentals.domain.model.value_objects import Quantity, RentalPeriod


@dataclass(frozen=True)
class Reservation:
    order_id: int
    product_id: str
    quantity: int
    period: RentalPeriod


@dataclass(frozen=True)
class ReservationRequest:
    """Input to the conflict check: one candidate order line."""

    product_id: str
    quantity: Quantity
    period: RentalPeriod


@dataclass(frozen=True)
class StockConflict:
    product_id: str
    product_name: str
    requested_qty: int
    available_qty: int
    start: datetime
    end: datetime

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "requested_qty": self.requested_qty,
            "available_qty": self.available_qty,
            "date_range": {
                "start": self.start.isoformat(),
                "end": self.end.isoformat(),
            },
        }

    @staticmethod
    def from_dict(raw: dict) -> StockConflict:
        return StockConflict(
            product_id=raw["product_id"],
            product_name=raw["product_name"],
            requested_qty=raw["requested_qty"],
            available_qty=raw["available_qty"],
            start=datetime.fromisoformat(raw["date_range"]["start"]),
            end=datetime.fromisoformat(raw["date_range"]["end"]),
        )
