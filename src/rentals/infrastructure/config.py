"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.value_objects import RentalUnit
from rentals.domain.service.financial_calculator import LateFeePolicy

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = _DEFAULT_DATA_DIR
    payment_base_url: str = "http://localhost:5173/payment"
    late_fee_policy: LateFeePolicy = field(default_factory=LateFeePolicy)
    log_level: str = "INFO"
    log_json: bool = False

    @staticmethod
    def from_env(environ: dict[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return Settings(
            data_dir=Path(env.get("RENTALS_DATA_DIR", str(_DEFAULT_DATA_DIR))),
            payment_base_url=env.get("RENTALS_PAYMENT_BASE_URL", Settings.payment_base_url),
            late_fee_policy=parse_late_fee_multipliers(
                env.get("RENTALS_LATE_FEE_MULTIPLIERS", "")
            ),
            log_level=env.get("RENTALS_LOG_LEVEL", "INFO").upper(),
            log_json=env.get("RENTALS_LOG_JSON", "").lower() in ("1", "true", "yes"),
        )


def parse_late_fee_multipliers(raw: str) -> LateFeePolicy:
    """Parse ``"DAY=1,HOUR=1.5"``; units left out bill at the plain rate."""
    multipliers = {unit: Decimal("1") for unit in RentalUnit}
    for pair in filter(None, (p.strip() for p in raw.split(","))):
        unit_name, sep, value = pair.partition("=")
        if not sep:
            raise ValidationError(
                f"Invalid late fee multiplier '{pair}'. Expected 'UNIT=MULTIPLIER'."
            )
        try:
            unit = RentalUnit(unit_name.strip().upper())
            multipliers[unit] = Decimal(value.strip())
        except (ValueError, InvalidOperation) as exc:
            raise ValidationError(f"Invalid late fee multiplier '{pair}'") from exc
    return LateFeePolicy(multipliers)
