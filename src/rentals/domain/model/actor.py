"""The resolved identity acting on the engine.

Authentication happens elsewhere; the core only receives who is acting
and in which role, and checks ownership where state depends on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from rentals.domain.exceptions import ValidationError


class Role(Enum):
    ADMIN = "ADMIN"
    VENDOR = "VENDOR"
    CUSTOMER = "CUSTOMER"


@dataclass(frozen=True)
class Actor:
    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @staticmethod
    def parse(raw: str) -> Actor:
        """Parse ``ROLE:ID`` (e.g. ``vendor:v1``)."""
        role_name, sep, actor_id = raw.partition(":")
        if not sep or not actor_id.strip():
            raise ValidationError(f"Invalid actor '{raw}'. Expected 'ROLE:ID'.")
        try:
            role = Role(role_name.strip().upper())
        except ValueError as exc:
            raise ValidationError(f"Unknown role '{role_name}'") from exc
        return Actor(id=actor_id.strip(), role=role)
