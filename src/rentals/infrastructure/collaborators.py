"""Default implementations of the notification and payment ports.

Real delivery and a real payment provider are wired in by the host
application; these keep the CLI self-contained.
"""

from __future__ import annotations

import secrets
from dataclasses import asdict, is_dataclass
from typing import Any

import structlog

from rentals.application.ports import NotificationEvent, Notifier, PaymentGateway
from rentals.domain.model.order import PaymentStatus

logger = structlog.get_logger(__name__)


class LoggingNotifier(Notifier):
    """Writes each notification to the log instead of sending it."""

    def notify(self, event: NotificationEvent, subject: Any) -> None:
        payload = asdict(subject) if is_dataclass(subject) else {"subject": repr(subject)}
        logger.info(
            "notification",
            notification=event.value,
            reference=payload.get("reference") or payload.get("number"),
        )


class TokenPaymentGateway(PaymentGateway):
    """Issues random payment tokens.

    With no provider behind it nothing is ever settled outside the engine,
    so every invoice reports UNPAID and a refresh leaves it as recorded.
    """

    def generate_payment_reference(self, invoice_id: int) -> str:
        return f"{invoice_id}-{secrets.token_urlsafe(24)}"

    def query_payment_status(self, invoice_id: int) -> PaymentStatus:
        logger.debug("payment_status_queried", invoice_id=invoice_id, provider=None)
        return PaymentStatus.UNPAID
