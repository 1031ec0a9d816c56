"""Payment session tests."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.bookings.models import Booking
from apps.bookings.tests.factories import insert_booking
from apps.hotels.tests.factories import create_customer, create_hotel, create_room_type, create_staff, next_monday
from apps.payments.instructions import build_upi_payload
from apps.payments.models import Payment, PaymentSession
from apps.payments.services import PaymentSessionManager
from apps.payments.tasks import sweep_expired_sessions
from apps.users.models import User
from shared.application.engine_config import EngineConfig
from shared.domain.exceptions import (
    AlreadyVerifiedError,
    InvalidStateError,
    SessionExpiredError,
    ValidationError,
)

CONFIG = EngineConfig(
    gst_percentage=Decimal("18"),
    session_window_minutes=5,
    merchant_id="hotel@upi",
    merchant_name="Seaside Inn",
)


class Clock:
    def __init__(self):
        self.now = timezone.now()

    def __call__(self):
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def manager(clock):
    return PaymentSessionManager(CONFIG, clock=clock)


@pytest.fixture
def booking(db):
    room_type = create_room_type(create_hotel(), rooms=2)
    return insert_booking(create_customer(), room_type, next_monday(), nights=3, status=Booking.Status.PENDING)


@pytest.fixture
def cashier(booking):
    return create_staff(booking.hotel, User.RoleChoices.ACCOUNTS)


def test_upi_payload_carries_merchant_and_amount():
    payload = build_upi_payload(CONFIG, Decimal("7080"), "0f8fad5b-d9cb-469f-a165-70867728950e")

    parsed = urlparse(payload)
    params = parse_qs(parsed.query)
    assert parsed.scheme == "upi"
    assert params["pa"] == ["hotel@upi"]
    assert params["pn"] == ["Seaside Inn"]
    assert params["am"] == ["7080.00"]
    assert params["cu"] == ["INR"]
    assert params["tn"] == ["Hotel Booking Payment - 0f8fad5b"]


@pytest.mark.django_db
def test_create_issues_pending_session_for_booking_total(manager, booking, clock):
    session = manager.create(booking.pk)

    assert session.status == PaymentSession.Status.PENDING
    assert session.amount == booking.total_amount
    assert session.expires_at == clock.now + timedelta(minutes=5)
    assert session.payment_payload.startswith("upi://pay?")
    assert session.instruction_data == session.payment_payload
    assert manager.remaining_seconds(session) == 300


@pytest.mark.django_db
def test_create_reuses_live_session(manager, booking, clock):
    first = manager.create(booking.pk)
    clock.advance(minutes=2)

    second = manager.create(booking.pk)

    assert second.pk == first.pk
    assert PaymentSession.objects.filter(booking=booking).count() == 1


@pytest.mark.django_db
def test_create_replaces_overdue_session(manager, booking, clock):
    first = manager.create(booking.pk)
    clock.advance(minutes=6)

    second = manager.create(booking.pk)

    first.refresh_from_db()
    assert second.pk != first.pk
    assert first.status == PaymentSession.Status.EXPIRED
    assert second.status == PaymentSession.Status.PENDING


@pytest.mark.django_db
def test_amount_must_match_booking_total(manager, booking):
    with pytest.raises(ValidationError) as excinfo:
        manager.create(booking.pk, amount=booking.total_amount - Decimal("1"))

    assert excinfo.value.code == "amount_mismatch"


@pytest.mark.django_db
def test_zero_total_booking_gets_no_session(manager, booking):
    Booking.objects.filter(pk=booking.pk).update(subtotal=Decimal("0.00"), total_amount=Decimal("0.00"))

    with pytest.raises(InvalidStateError) as excinfo:
        manager.create(booking.pk)

    assert excinfo.value.code == "nothing_to_pay"
    assert not PaymentSession.objects.exists()


@pytest.mark.django_db
@pytest.mark.parametrize("status", [Booking.Status.CONFIRMED, Booking.Status.CANCELLED])
def test_only_pending_bookings_take_payment(manager, booking, status):
    Booking.objects.filter(pk=booking.pk).update(status=status, cancelled_at=timezone.now())

    with pytest.raises(InvalidStateError) as excinfo:
        manager.create(booking.pk)

    assert excinfo.value.code == "booking_not_pending"


@pytest.mark.django_db
def test_verify_confirms_booking_and_records_payment(manager, booking, cashier, clock):
    session = manager.create(booking.pk)
    clock.advance(minutes=4, seconds=59)

    payment = manager.verify(session.pk, "UPI-123456", Payment.Method.UPI, cashier)

    session.refresh_from_db()
    booking.refresh_from_db()
    assert payment.amount == booking.total_amount
    assert payment.status == Payment.Status.COMPLETED
    assert payment.verified_by == cashier
    assert session.status == PaymentSession.Status.PAID
    assert booking.status == Booking.Status.CONFIRMED

    with pytest.raises(AlreadyVerifiedError):
        manager.verify(session.pk, "UPI-123456", Payment.Method.UPI, cashier)
    assert Payment.objects.filter(session=session).count() == 1


@pytest.mark.django_db
def test_verify_after_window_expires_session(manager, booking, cashier, clock):
    session = manager.create(booking.pk)
    clock.advance(minutes=5, seconds=1)

    with pytest.raises(SessionExpiredError):
        manager.verify(session.pk, "UPI-LATE", Payment.Method.UPI, cashier)

    session.refresh_from_db()
    booking.refresh_from_db()
    assert session.status == PaymentSession.Status.EXPIRED
    assert booking.status == Booking.Status.PENDING
    assert not Payment.objects.exists()


@pytest.mark.django_db
def test_reading_overdue_session_expires_it(manager, booking, clock):
    session = manager.create(booking.pk)
    clock.advance(minutes=10)

    fetched = manager.get(session.pk)

    assert fetched.status == PaymentSession.Status.EXPIRED
    assert manager.remaining_seconds(fetched) == 0


@pytest.mark.django_db
def test_token_lookup_also_expires_overdue_session(manager, booking, clock):
    session = manager.create(booking.pk)
    clock.advance(minutes=5, seconds=1)

    fetched = manager.get_by_token(session.session_token)

    assert fetched.pk == session.pk
    assert fetched.status == PaymentSession.Status.EXPIRED


@pytest.mark.django_db
def test_failed_session_cannot_be_verified(manager, booking, cashier):
    session = manager.create(booking.pk)
    manager.mark_failed(session.pk, "Bank declined")

    with pytest.raises(InvalidStateError) as excinfo:
        manager.verify(session.pk, "UPI-1", Payment.Method.UPI, cashier)

    assert excinfo.value.code == "session_failed"


@pytest.mark.django_db
def test_sweep_expires_only_overdue_sessions(manager, booking, clock):
    overdue = manager.create(booking.pk)
    other = insert_booking(create_customer(), booking.room_type, next_monday(), status=Booking.Status.PENDING)
    clock.advance(minutes=3)
    live = manager.create(other.pk)
    clock.advance(minutes=3)

    assert manager.sweep_expired() == 1

    overdue.refresh_from_db()
    live.refresh_from_db()
    assert overdue.status == PaymentSession.Status.EXPIRED
    assert live.status == PaymentSession.Status.PENDING


@pytest.mark.django_db
def test_sweep_task_reports_count(booking):
    PaymentSession.objects.create(
        booking=booking,
        amount=booking.total_amount,
        merchant_id="hotel@upi",
        expires_at=timezone.now() - timedelta(minutes=1),
    )

    assert sweep_expired_sessions() == {"expired": 1}
    assert sweep_expired_sessions() == {"expired": 0}


@pytest.mark.django_db
def test_one_pending_session_per_booking_is_enforced(booking):
    expires_at = timezone.now() + timedelta(minutes=5)
    PaymentSession.objects.create(booking=booking, amount=booking.total_amount, expires_at=expires_at)

    with pytest.raises(IntegrityError), transaction.atomic():
        PaymentSession.objects.create(booking=booking, amount=booking.total_amount, expires_at=expires_at)
