"""JSON-document-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from rentals.domain.model.order import (
    RESERVATION_STATUSES,
    Order,
    OrderLine,
    OrderStatus,
    OverrideRecord,
    PaymentStatus,
)
from rentals.domain.model.reservation import Reservation, StockConflict
from rentals.domain.model.value_objects import Money, Quantity, RentalPeriod, RentalUnit
from rentals.domain.repository.order_repository import OrderRepository

_RESERVING = {status.value for status in RESERVATION_STATUSES}


class JsonOrderRepository(OrderRepository):
    """Works on the ``orders`` collection of an open JSON unit of work."""

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(o["id"] for o in self._records) + 1

    def next_reference(self) -> str:
        numbers = [int(o["reference"].lstrip("S")) for o in self._records]
        return f"S{max(numbers, default=0) + 1:05d}"

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._records:
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._records]

    def find_reservations(
        self,
        product_id: str,
        period: RentalPeriod,
        exclude_order_id: int | None = None,
    ) -> list[Reservation]:
        found: list[Reservation] = []
        for raw in self._records:
            if raw["status"] not in _RESERVING or raw["id"] == exclude_order_id:
                continue
            for line in raw["lines"]:
                if line["product_id"] != product_id:
                    continue
                line_period = RentalPeriod(
                    datetime.fromisoformat(line["start"]),
                    datetime.fromisoformat(line["end"]),
                )
                if line_period.overlaps(period):
                    found.append(
                        Reservation(
                            order_id=raw["id"],
                            product_id=product_id,
                            quantity=line["quantity"],
                            period=line_period,
                        )
                    )
        return found

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(self._records):
            if raw["id"] == order.id:
                self._records[i] = self._to_raw(order)
                return
        self._records.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "reference": order.reference,
            "customer_id": order.customer_id,
            "vendor_id": order.vendor_id,
            "status": order.status.value,
            "payment_status": order.payment_status.value,
            "discount": str(order.discount.amount),
            "shipping": str(order.shipping.amount),
            "tax_rate": str(order.tax_rate),
            "down_payment": str(order.down_payment.amount),
            "total_amount": str(order.total_amount.amount),
            "late_fee": str(order.late_fee.amount),
            "currency": order.total_amount.currency,
            "rejection_reason": order.rejection_reason,
            "override_log": [
                {
                    "actor_id": entry.actor_id,
                    "at": entry.at.isoformat(),
                    "conflicts": [c.to_dict() for c in entry.conflicts],
                }
                for entry in order.override_log
            ],
            "created_at": order.created_at.isoformat(),
            "sent_at": _iso(order.sent_at),
            "confirmed_at": _iso(order.confirmed_at),
            "picked_up_at": _iso(order.picked_up_at),
            "returned_at": _iso(order.returned_at),
            "lines": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "rent_rate": str(line.rent_rate.amount),
                    "rent_unit": line.rent_unit.value,
                    "start": line.period.start.isoformat(),
                    "end": line.period.end.isoformat(),
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")

        def money(key: str) -> Money:
            return Money(Decimal(raw[key]), currency)

        lines = [
            OrderLine(
                product_id=line["product_id"],
                product_name=line["product_name"],
                quantity=Quantity(line["quantity"]),
                unit_price=Money(Decimal(line["unit_price"]), currency),
                period=RentalPeriod(
                    datetime.fromisoformat(line["start"]),
                    datetime.fromisoformat(line["end"]),
                ),
                rent_rate=Money(Decimal(line["rent_rate"]), currency),
                rent_unit=RentalUnit(line["rent_unit"]),
            )
            for line in raw["lines"]
        ]
        return Order(
            id=raw["id"],
            reference=raw["reference"],
            customer_id=raw["customer_id"],
            vendor_id=raw["vendor_id"],
            lines=lines,
            status=OrderStatus(raw["status"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            discount=money("discount"),
            shipping=money("shipping"),
            tax_rate=Decimal(raw["tax_rate"]),
            down_payment=money("down_payment"),
            total_amount=money("total_amount"),
            late_fee=money("late_fee"),
            rejection_reason=raw.get("rejection_reason"),
            override_log=[
                OverrideRecord(
                    actor_id=entry["actor_id"],
                    at=datetime.fromisoformat(entry["at"]),
                    conflicts=tuple(StockConflict.from_dict(c) for c in entry["conflicts"]),
                )
                for entry in raw.get("override_log", [])
            ],
            created_at=datetime.fromisoformat(raw["created_at"]),
            sent_at=_parse(raw.get("sent_at")),
            confirmed_at=_parse(raw.get("confirmed_at")),
            picked_up_at=_parse(raw.get("picked_up_at")),
            returned_at=_parse(raw.get("returned_at")),
        )


def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment is not None else None


def _parse(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None
