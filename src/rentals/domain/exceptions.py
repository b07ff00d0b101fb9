"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from rentals.domain.model.reservation import StockConflict


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed input or a violated business rule."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AuthorizationError(DomainException):
    """The acting user has no rights over the referenced entity."""


class InvalidTransitionError(DomainException):
    """The order is not in a status the requested transition starts from."""

    def __init__(self, action: str, current: str, required: Iterable[str]) -> None:
        self.action = action
        self.current = current
        self.required = tuple(required)
        super().__init__(
            f"Cannot {action} order — current status is {current}, "
            f"expected {' or '.join(self.required)}"
        )


class PaymentRequiredError(InvalidTransitionError):
    """Pickup attempted before the order is fully paid."""

    def __init__(self, payment_status: str) -> None:
        self.action = "pick up"
        self.current = payment_status
        self.required = ("PAID",)
        DomainException.__init__(
            self,
            f"Cannot pick up order — payment status is {payment_status}, "
            f"expected PAID",
        )


class StockConflictError(DomainException):
    """Confirming would rent out more units than are on hand.

    Carries every conflicting line, in the order the lines were given.
    """

    def __init__(self, conflicts: list[StockConflict]) -> None:
        self.conflicts = list(conflicts)
        names = ", ".join(c.product_name for c in self.conflicts)
        super().__init__(f"Stock conflict for {names}")
