"""Abstract unit of work.

A unit of work is the transaction boundary of the engine: everything read
and written between entering the block and ``commit()`` happens under one
exclusive hold on the store, so a confirm's availability check and its
status write can never interleave with another confirm.  Leaving the
block without committing discards every change.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.repository.invoice_repository import InvoiceRepository
from rentals.domain.repository.order_repository import OrderRepository
from rentals.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):

    orders: OrderRepository
    products: ProductRepository
    invoices: InvoiceRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        self._committed = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if not self._committed:
                self.rollback()
        finally:
            self._end()

    def commit(self) -> None:
        self._commit()
        self._committed = True

    @abstractmethod
    def rollback(self) -> None:
        """Discard everything written since the block was entered."""

    @abstractmethod
    def _begin(self) -> None:
        """Take the exclusive hold and load a working copy."""

    @abstractmethod
    def _commit(self) -> None:
        """Make the working copy durable."""

    @abstractmethod
    def _end(self) -> None:
        """Release the hold taken by ``_begin``."""
