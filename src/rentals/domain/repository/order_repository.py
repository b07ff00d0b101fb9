"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rentals.domain.model.order import Order
from rentals.domain.model.reservation import Reservation
from rentals.domain.model.value_objects import RentalPeriod


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> int:
        """Generate the next unique order ID."""

    @abstractmethod
    def next_reference(self) -> str:
        """Generate the next human-readable reference (S00001, S00002, ...)."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order."""

    @abstractmethod
    def find_reservations(
        self,
        product_id: str,
        period: RentalPeriod,
        exclude_order_id: int | None = None,
    ) -> list[Reservation]:
        """Return active reservations of *product_id* overlapping *period*.

        Only orders in a reservation-holding status contribute.
        """

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""
