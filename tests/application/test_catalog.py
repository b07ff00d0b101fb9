"""Integration tests for the product catalog and availability queries."""

import pytest

from rentals.application.add_product import AddProductHandler, ListProductsHandler
from rentals.application.check_availability import CheckAvailabilityHandler
from rentals.application.update_product import UpdateProductHandler
from rentals.domain.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    ValidationError,
)
from rentals.domain.model.actor import Actor, Role
from rentals.domain.model.order import OrderStatus
from rentals.domain.model.value_objects import Money, RentalUnit
from tests.fakes import FakeUnitOfWork, InMemoryStore, day, make_line, make_order, make_product

VENDOR = Actor("v1", Role.VENDOR)


class TestAddProduct:

    def test_vendor_adds_own_product(self):
        store = InMemoryStore()
        dto = AddProductHandler(FakeUnitOfWork(store)).handle(
            VENDOR, "Tent", 4, "12.50", rent_unit="week"
        )
        assert dto.id == "1"
        assert dto.vendor_id == "v1"
        assert store.products["1"].rent_unit == RentalUnit.WEEK

    def test_admin_must_name_vendor(self):
        handler = AddProductHandler(FakeUnitOfWork())
        with pytest.raises(ValidationError, match="Vendor is required"):
            handler.handle(Actor("root", Role.ADMIN), "Tent", 4, "12.50")
        dto = handler.handle(Actor("root", Role.ADMIN), "Tent", 4, "12.50", vendor_id="v9")
        assert dto.vendor_id == "v9"

    def test_customer_refused(self):
        with pytest.raises(AuthorizationError):
            AddProductHandler(FakeUnitOfWork()).handle(
                Actor("c1", Role.CUSTOMER), "Tent", 4, "12.50"
            )

    def test_unknown_unit(self):
        with pytest.raises(ValidationError, match="Unknown rental unit"):
            AddProductHandler(FakeUnitOfWork()).handle(VENDOR, "Tent", 4, "1", rent_unit="YEAR")

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            AddProductHandler(FakeUnitOfWork()).handle(VENDOR, "Tent", -1, "1")

    def test_list_filters_by_vendor(self):
        store = InMemoryStore([
            make_product(id="1", vendor_id="v1"),
            make_product(id="2", vendor_id="v2"),
        ])
        handler = ListProductsHandler(FakeUnitOfWork(store))
        assert len(handler.handle()) == 2
        assert [p.id for p in handler.handle(vendor_id="v2")] == ["2"]


class TestUpdateProduct:

    def test_owner_changes_price(self):
        store = InMemoryStore([make_product()])
        UpdateProductHandler(FakeUnitOfWork(store)).handle(VENDOR, "1", "15")
        assert store.products["1"].rent_price == Money.of("15")

    def test_other_vendor_refused(self):
        store = InMemoryStore([make_product()])
        with pytest.raises(AuthorizationError):
            UpdateProductHandler(FakeUnitOfWork(store)).handle(
                Actor("v2", Role.VENDOR), "1", "15"
            )

    def test_unknown_product(self):
        with pytest.raises(EntityNotFoundError):
            UpdateProductHandler(FakeUnitOfWork()).handle(VENDOR, "9", "15")


class TestCheckAvailability:

    def test_reports_committed_and_available(self):
        product = make_product(quantity_on_hand=5)
        store = InMemoryStore([product])
        store.orders[1] = make_order(
            id=1,
            status=OrderStatus.CONFIRMED,
            lines=[make_line(product, qty=2, start=day(1), end=day(5))],
        )
        store.orders[2] = make_order(
            id=2,
            status=OrderStatus.APPROVED,
            lines=[make_line(product, qty=3, start=day(1), end=day(5))],
        )

        dto = CheckAvailabilityHandler(FakeUnitOfWork(store)).handle("1", day(4), day(8))

        assert (dto.quantity_on_hand, dto.committed, dto.available) == (5, 2, 3)

    def test_unknown_product(self):
        with pytest.raises(EntityNotFoundError):
            CheckAvailabilityHandler(FakeUnitOfWork()).handle("9", day(1), day(2))
