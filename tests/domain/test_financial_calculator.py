"""Unit tests for the pricing and late-fee calculations."""

from datetime import timedelta
from decimal import Decimal

import pytest

from rentals.domain.exceptions import ValidationError
from rentals.domain.model.order import OrderStatus
from rentals.domain.model.value_objects import Money, RentalPeriod, RentalUnit
from rentals.domain.service import financial_calculator
from rentals.domain.service.financial_calculator import LateFeePolicy, quote_unit_price
from tests.fakes import day, make_line, make_order, make_product


class TestTotals:

    def test_discount_shipping_and_tax(self):
        order = make_order(
            lines=[make_line(qty=2, unit_price="100")],
            discount=Money.of("20"),
            shipping=Money.of("10"),
            tax_rate=Decimal("10"),
        )
        assert financial_calculator.subtotal(order.lines) == Money.of("200")
        assert financial_calculator.tax_amount(Money.of("200"), order.tax_rate) == Money.of("20")
        assert financial_calculator.total(order) == Money.of("210")

    def test_total_is_idempotent(self):
        order = make_order(
            lines=[make_line(qty=3, unit_price="33.33")], tax_rate=Decimal("7.5")
        )
        first = financial_calculator.total(order)
        assert financial_calculator.total(order) == first
        assert order.total_amount == first

    def test_tax_applies_to_subtotal_only(self):
        order = make_order(
            lines=[make_line(unit_price="100")],
            shipping=Money.of("50"),
            tax_rate=Decimal("10"),
        )
        assert financial_calculator.total(order) == Money.of("160")

    def test_rounded_once_at_the_end(self):
        # Rounding each line first would give $0.00
        order = make_order(
            lines=[make_line(unit_price="0.004"), make_line(unit_price="0.004")]
        )
        assert financial_calculator.total(order).amount == Decimal("0.01")

    def test_discount_above_gross_rejected(self):
        order = make_order(lines=[make_line(unit_price="10")])
        order.discount = Money.of("25")
        with pytest.raises(ValidationError, match="exceeds order value"):
            financial_calculator.total(order)


class TestQuoteUnitPrice:

    def test_whole_days(self):
        period = RentalPeriod(day(1), day(4))
        assert quote_unit_price(Money.of("10"), RentalUnit.DAY, period) == Money.of("30")

    def test_partial_unit_bills_in_full(self):
        period = RentalPeriod(day(1), day(4, hour=1))
        assert quote_unit_price(Money.of("10"), RentalUnit.DAY, period) == Money.of("40")

    def test_weekly_rate(self):
        period = RentalPeriod(day(1), day(11))
        assert quote_unit_price(Money.of("50"), RentalUnit.WEEK, period) == Money.of("100")


class TestLateFee:

    def _picked_up(self, qty=1, rate="100", unit=RentalUnit.DAY, end=None):
        product = make_product(rent_price=rate, rent_unit=unit)
        return make_order(
            lines=[make_line(product, qty=qty, start=day(1), end=end or day(10))],
            status=OrderStatus.PICKEDUP,
        )

    def test_two_days_late(self):
        order = self._picked_up()
        assert financial_calculator.late_fee(order, day(12)) == Money.of("200")

    def test_on_time_is_free(self):
        order = self._picked_up()
        assert financial_calculator.late_fee(order, day(10)).is_zero
        assert financial_calculator.late_fee(order, day(9)).is_zero

    def test_started_unit_counts(self):
        order = self._picked_up()
        late = day(10) + timedelta(minutes=1)
        assert financial_calculator.late_fee(order, late) == Money.of("100")

    def test_quantity_multiplies(self):
        order = self._picked_up(qty=3)
        assert financial_calculator.late_fee(order, day(11)) == Money.of("300")

    def test_hourly_line(self):
        order = self._picked_up(rate="5", unit=RentalUnit.HOUR)
        assert financial_calculator.late_fee(order, day(10, hour=3)) == Money.of("15")

    def test_measured_from_latest_line_end(self):
        product = make_product(rent_price="10")
        order = make_order(
            lines=[
                make_line(product, start=day(1), end=day(3)),
                make_line(product, start=day(1), end=day(6)),
            ],
            status=OrderStatus.PICKEDUP,
        )
        # One day past day 6 billed for both lines
        assert financial_calculator.late_fee(order, day(7)) == Money.of("20")

    def test_policy_multiplier(self):
        order = self._picked_up()
        policy = LateFeePolicy({RentalUnit.DAY: Decimal("1.5")})
        assert financial_calculator.late_fee(order, day(12), policy) == Money.of("300")

    def test_missing_unit_defaults_to_plain_rate(self):
        policy = LateFeePolicy({RentalUnit.HOUR: Decimal("2")})
        assert policy.multiplier_for(RentalUnit.DAY) == Decimal("1")

    def test_negative_multiplier_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            LateFeePolicy({RentalUnit.DAY: Decimal("-1")})

    def test_naive_return_time_is_utc(self):
        order = self._picked_up()
        naive = day(12).replace(tzinfo=None)
        assert financial_calculator.late_fee(order, naive) == Money.of("200")
