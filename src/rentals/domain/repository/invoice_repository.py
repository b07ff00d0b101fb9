"""Abstract repository for Invoice aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.invoice import Invoice


class InvoiceRepository(ABC):

    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Invoice | None:
        """Return an invoice by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_id(self, order_id: int) -> Invoice | None:
        """Return the invoice issued for an order, or None."""

    @abstractmethod
    def next_number(self, year: int) -> str:
        """Generate the next invoice number for *year* (INV/2026/001)."""

    @abstractmethod
    def save(self, invoice: Invoice) -> None:
        """Persist a new or updated invoice."""
