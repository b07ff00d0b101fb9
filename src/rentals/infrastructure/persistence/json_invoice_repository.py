"""JSON-document-backed implementation of InvoiceRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from rentals.domain.model.invoice import Invoice
from rentals.domain.model.value_objects import Money
from rentals.domain.repository.invoice_repository import InvoiceRepository


class JsonInvoiceRepository(InvoiceRepository):
    """Works on the ``invoices`` collection of an open JSON unit of work."""

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- InvoiceRepository interface ------------------------------------------

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        for raw in self._records:
            if raw["id"] == invoice_id:
                return self._to_domain(raw)
        return None

    def get_by_order_id(self, order_id: int) -> Invoice | None:
        for raw in self._records:
            if raw["order_id"] == order_id:
                return self._to_domain(raw)
        return None

    def next_number(self, year: int) -> str:
        prefix = f"INV/{year}/"
        numbers = [
            int(raw["number"][len(prefix):])
            for raw in self._records
            if raw["number"].startswith(prefix)
        ]
        return f"{prefix}{max(numbers, default=0) + 1:03d}"

    def save(self, invoice: Invoice) -> None:
        if invoice.id is None:
            invoice.id = max((raw["id"] for raw in self._records), default=0) + 1

        for i, raw in enumerate(self._records):
            if raw["id"] == invoice.id:
                self._records[i] = self._to_raw(invoice)
                return
        self._records.append(self._to_raw(invoice))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(invoice: Invoice) -> dict:
        return {
            "id": invoice.id,
            "order_id": invoice.order_id,
            "number": invoice.number,
            "amount_due": str(invoice.amount_due.amount),
            "amount_paid": str(invoice.amount_paid.amount),
            "currency": invoice.amount_due.currency,
            "sent_at": invoice.sent_at.isoformat() if invoice.sent_at else None,
            "payment_token": invoice.payment_token,
            "created_at": invoice.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Invoice:
        currency = raw.get("currency", "USD")
        return Invoice(
            id=raw["id"],
            order_id=raw["order_id"],
            number=raw["number"],
            amount_due=Money(Decimal(raw["amount_due"]), currency),
            amount_paid=Money(Decimal(raw["amount_paid"]), currency),
            sent_at=datetime.fromisoformat(raw["sent_at"]) if raw.get("sent_at") else None,
            payment_token=raw.get("payment_token"),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
