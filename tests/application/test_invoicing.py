"""Integration tests for invoicing and payments."""

import pytest

from rentals.application.create_invoice import CreateInvoiceHandler
from rentals.application.dispatch_invoice import DispatchInvoiceHandler
from rentals.application.ports import NotificationEvent
from rentals.application.record_payment import (
    RecordPaymentHandler,
    RefreshPaymentStatusHandler,
)
from rentals.application.show_order import ShowInvoiceHandler
from rentals.domain.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    InvalidTransitionError,
    ValidationError,
)
from rentals.domain.model.actor import Actor, Role
from rentals.domain.model.order import OrderStatus, PaymentStatus
from rentals.domain.model.value_objects import Money
from tests.fakes import (
    FakePaymentGateway,
    FakeUnitOfWork,
    FixedClock,
    InMemoryStore,
    RecordingNotifier,
    day,
    make_line,
    make_order,
    make_product,
)

VENDOR = Actor("v1", Role.VENDOR)
CUSTOMER = Actor("c1", Role.CUSTOMER)


def _setup(down_payment="0", status=OrderStatus.CONFIRMED):
    store = InMemoryStore([make_product()])
    store.orders[1] = make_order(
        id=1,
        status=status,
        lines=[make_line(qty=2, unit_price="50")],
        down_payment=Money.of(down_payment),
    )
    uow = FakeUnitOfWork(store)
    return store, uow


def _invoiced(down_payment="0"):
    store, uow = _setup(down_payment)
    dto = CreateInvoiceHandler(uow, clock=FixedClock(day(2))).handle(VENDOR, 1)
    return store, uow, dto


class TestCreateInvoice:

    def test_invoice_for_confirmed_order(self):
        store, _, dto = _invoiced()

        assert dto.number == "INV/2026/001"
        assert dto.amount_due == "$100.00"
        assert dto.payment_status == "UNPAID"
        assert dto.sent_at is None
        assert store.orders[1].status == OrderStatus.INVOICED

    def test_down_payment_counts_as_paid(self):
        store, _, dto = _invoiced(down_payment="40")
        assert dto.amount_paid == "$40.00"
        assert dto.balance == "$60.00"
        assert store.orders[1].payment_status == PaymentStatus.PARTIAL

    def test_second_invoice_refused(self):
        store, uow, _ = _invoiced()
        store.orders[1].status = OrderStatus.CONFIRMED
        with pytest.raises(ValidationError, match="already exists"):
            CreateInvoiceHandler(uow).handle(VENDOR, 1)
        assert len(store.invoices) == 1

    def test_approved_order_cannot_be_invoiced(self):
        _, uow = _setup(status=OrderStatus.APPROVED)
        with pytest.raises(InvalidTransitionError, match="expected CONFIRMED"):
            CreateInvoiceHandler(uow).handle(VENDOR, 1)

    def test_customer_cannot_invoice(self):
        _, uow = _setup()
        with pytest.raises(AuthorizationError):
            CreateInvoiceHandler(uow).handle(CUSTOMER, 1)


class TestDispatchInvoice:

    def test_dispatch_issues_payment_link(self):
        store, uow, invoice = _invoiced()
        notifier = RecordingNotifier()
        handler = DispatchInvoiceHandler(
            uow,
            FakePaymentGateway(),
            notifier,
            payment_base_url="https://pay.example/p/",
            clock=FixedClock(day(3)),
        )

        dto = handler.handle(VENDOR, invoice.id)

        assert dto.payment_link == "https://pay.example/p/tok-1-1"
        assert dto.sent_at is not None
        assert store.invoices[invoice.id].payment_token == "tok-1-1"
        assert notifier.events == [NotificationEvent.INVOICE_DISPATCHED]

    def test_unknown_invoice(self):
        _, uow, _ = _invoiced()
        handler = DispatchInvoiceHandler(uow, FakePaymentGateway(), RecordingNotifier())
        with pytest.raises(EntityNotFoundError, match="Invoice #42 not found"):
            handler.handle(VENDOR, 42)


class TestRecordPayment:

    def test_partial_then_full(self):
        store, uow, invoice = _invoiced()
        handler = RecordPaymentHandler(uow)

        first = handler.handle(CUSTOMER, invoice.id, "30")
        assert first.payment_status == "PARTIAL"
        assert store.orders[1].payment_status == PaymentStatus.PARTIAL

        second = handler.handle(CUSTOMER, invoice.id, "70")
        assert second.payment_status == "PAID"
        assert second.balance == "$0.00"
        assert store.orders[1].payment_status == PaymentStatus.PAID

    def test_overpayment_refused(self):
        store, uow, invoice = _invoiced()
        with pytest.raises(ValidationError, match="exceeds outstanding balance"):
            RecordPaymentHandler(uow).handle(CUSTOMER, invoice.id, "100.01")
        assert store.invoices[invoice.id].amount_paid.is_zero

    def test_stranger_cannot_pay(self):
        _, uow, invoice = _invoiced()
        with pytest.raises(AuthorizationError):
            RecordPaymentHandler(uow).handle(Actor("c2", Role.CUSTOMER), invoice.id, "10")


class TestRefreshPaymentStatus:

    def test_paid_report_settles_the_invoice(self):
        store, uow, invoice = _invoiced()
        handler = RefreshPaymentStatusHandler(uow, FakePaymentGateway(PaymentStatus.PAID))

        dto = handler.handle(VENDOR, invoice.id)

        assert dto.payment_status == "PAID"
        assert dto.balance == "$0.00"
        stored = store.invoices[invoice.id]
        assert stored.amount_paid == stored.amount_due
        assert store.orders[1].payment_status == stored.payment_status == PaymentStatus.PAID

    def test_settled_invoice_takes_no_further_payment(self):
        _, uow, invoice = _invoiced()
        RefreshPaymentStatusHandler(uow, FakePaymentGateway(PaymentStatus.PAID)).handle(
            VENDOR, invoice.id
        )
        with pytest.raises(ValidationError, match="exceeds outstanding balance"):
            RecordPaymentHandler(uow).handle(CUSTOMER, invoice.id, "100")

    def test_unpaid_report_does_not_undo_recorded_payments(self):
        store, uow, invoice = _invoiced()
        RecordPaymentHandler(uow).handle(CUSTOMER, invoice.id, "30")

        dto = RefreshPaymentStatusHandler(
            uow, FakePaymentGateway(PaymentStatus.UNPAID)
        ).handle(VENDOR, invoice.id)

        assert dto.payment_status == "PARTIAL"
        assert store.invoices[invoice.id].amount_paid == Money.of("30")
        assert store.orders[1].payment_status == PaymentStatus.PARTIAL

    def test_paid_report_on_paid_invoice_is_a_no_op(self):
        store, uow, invoice = _invoiced(down_payment="100")
        handler = RefreshPaymentStatusHandler(uow, FakePaymentGateway(PaymentStatus.PAID))

        assert handler.handle(VENDOR, invoice.id).payment_status == "PAID"
        assert store.invoices[invoice.id].amount_paid == Money.of("100")

    def test_customer_cannot_refresh(self):
        _, uow, invoice = _invoiced()
        handler = RefreshPaymentStatusHandler(uow, FakePaymentGateway(PaymentStatus.PAID))
        with pytest.raises(AuthorizationError):
            handler.handle(CUSTOMER, invoice.id)


class TestShowInvoice:

    def test_by_id_and_by_order(self):
        _, uow, invoice = _invoiced()
        handler = ShowInvoiceHandler(uow)
        assert handler.handle(invoice_id=invoice.id).number == "INV/2026/001"
        assert handler.handle(order_id=1).id == invoice.id

    def test_order_without_invoice(self):
        _, uow = _setup()
        with pytest.raises(EntityNotFoundError, match="No invoice for order #1"):
            ShowInvoiceHandler(uow).handle(order_id=1)
