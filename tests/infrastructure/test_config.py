"""Tests for environment-driven settings."""

from decimal import Decimal
from pathlib import Path

import pytest

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.value_objects import RentalUnit
from rentals.infrastructure.config import Settings, parse_late_fee_multipliers


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.payment_base_url == "http://localhost:5173/payment"
        assert settings.log_level == "INFO"
        assert not settings.log_json
        assert settings.late_fee_policy.multiplier_for(RentalUnit.DAY) == Decimal("1")

    def test_from_environment(self):
        settings = Settings.from_env({
            "RENTALS_DATA_DIR": "/tmp/rentals",
            "RENTALS_PAYMENT_BASE_URL": "https://pay.example",
            "RENTALS_LATE_FEE_MULTIPLIERS": "day=1.5, hour=2",
            "RENTALS_LOG_LEVEL": "debug",
            "RENTALS_LOG_JSON": "true",
        })
        assert settings.data_dir == Path("/tmp/rentals")
        assert settings.payment_base_url == "https://pay.example"
        assert settings.late_fee_policy.multiplier_for(RentalUnit.DAY) == Decimal("1.5")
        assert settings.late_fee_policy.multiplier_for(RentalUnit.HOUR) == Decimal("2")
        assert settings.late_fee_policy.multiplier_for(RentalUnit.WEEK) == Decimal("1")
        assert settings.log_level == "DEBUG"
        assert settings.log_json


class TestLateFeeMultipliers:

    @pytest.mark.parametrize("raw", ["DAY", "YEAR=2", "DAY=abc"])
    def test_malformed(self, raw):
        with pytest.raises(ValidationError, match="Invalid late fee multiplier"):
            parse_late_fee_multipliers(raw)

    def test_negative(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            parse_late_fee_multipliers("DAY=-1")

    @pytest.mark.parametrize("value", ["NaN", "sNaN", "Infinity"])
    def test_non_finite(self, value):
        with pytest.raises(ValidationError, match="must be finite"):
            parse_late_fee_multipliers(f"HOUR={value}")
