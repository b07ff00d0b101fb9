"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from rentals.domain.service.financial_calculator import LateFeePolicy
from rentals.infrastructure.collaborators import LoggingNotifier, TokenPaymentGateway
from rentals.infrastructure.config import Settings
from rentals.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


def settings() -> Settings:
    return Settings.from_env()


def unit_of_work() -> JsonUnitOfWork:
    return JsonUnitOfWork(settings().data_dir)


def notifier() -> LoggingNotifier:
    return LoggingNotifier()


def payment_gateway() -> TokenPaymentGateway:
    return TokenPaymentGateway()


def late_fee_policy() -> LateFeePolicy:
    return settings().late_fee_policy


def payment_base_url() -> str:
    return settings().payment_base_url
