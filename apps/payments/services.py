"""Payment session manager.

Session states: pending -> paid | expired | failed, all terminal.

Expiry is enforced two ways: reading an overdue pending session flips it
to expired (lazy expiry), and a periodic sweep expires overdue sessions in
bulk for sessions nobody reads. ``remaining_seconds`` is for display only.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from decimal import Decimal
from typing import Callable, Optional

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.events import BookingConfirmed
from apps.bookings.models import Booking
from shared.application.engine_config import EngineConfig
from shared.application.uow import DjangoUnitOfWork, lock_queryset_if_possible
from shared.domain.exceptions import (
    AlreadyVerifiedError,
    InvalidStateError,
    NotFoundError,
    SessionExpiredError,
    ValidationError,
)

from .domain.events import PaymentSessionCreated, PaymentSessionExpired, PaymentVerified
from .instructions import build_upi_payload, render_instruction
from .models import Payment, PaymentSession

logger = logging.getLogger(__name__)


class PaymentSessionManager:
    def __init__(self, config: Optional[EngineConfig] = None, clock: Callable = timezone.now):
        self.config = config or EngineConfig.from_settings()
        self.clock = clock

    # --- Queries ------------------------------------------------------------

    def _fetch(self, session_id: int) -> PaymentSession:
        try:
            return PaymentSession.objects.select_related("booking").get(pk=session_id)
        except PaymentSession.DoesNotExist:
            raise NotFoundError(f"Payment session {session_id} not found.")

    def get(self, session_id: int) -> PaymentSession:
        """Return the session, expiring it first when it is pending and overdue."""

        session = self._fetch(session_id)
        if session.is_overdue(self.clock()):
            self._expire(session.pk)
            session.refresh_from_db()
        return session

    def get_by_token(self, token: str) -> PaymentSession:
        try:
            session = PaymentSession.objects.get(session_token=token)
        except PaymentSession.DoesNotExist:
            raise NotFoundError("Payment session not found.")
        return self.get(session.pk)

    def sessions_for_booking(self, booking_id: int):
        return PaymentSession.objects.filter(booking_id=booking_id).order_by("-created_at")

    def payments_for_booking(self, booking_id: int):
        return Payment.objects.filter(booking_id=booking_id).order_by("-created_at")

    def remaining_seconds(self, session: PaymentSession) -> int:
        remaining = (session.expires_at - self.clock()).total_seconds()
        return max(0, math.floor(remaining))

    # --- Commands -----------------------------------------------------------

    def _expire(self, session_id: int) -> None:
        with DjangoUnitOfWork() as uow:
            session = lock_queryset_if_possible(PaymentSession.objects.filter(pk=session_id)).first()
            if session is None or not session.is_overdue(self.clock()):
                return
            session.mark_expired()
            session.add_event(PaymentSessionExpired(session_id=session.pk, booking_id=session.booking_id))
            uow.collect_events(session)
        logger.info(f"Payment session {session.session_token[:8]} expired on read")

    def create(self, booking_id: int, amount: Optional[Decimal] = None) -> PaymentSession:
        """Return the booking's live pending session, or issue a new one."""

        with DjangoUnitOfWork() as uow:
            booking = lock_queryset_if_possible(Booking.objects.filter(pk=booking_id)).first()
            if booking is None:
                raise NotFoundError(f"Booking {booking_id} not found.")
            if booking.status != Booking.Status.PENDING:
                raise InvalidStateError(
                    f"Booking {booking.booking_reference} is {booking.status}; only pending bookings take payment.",
                    code="booking_not_pending",
                )
            if booking.total_amount <= 0:
                raise InvalidStateError(
                    f"Booking {booking.booking_reference} has nothing to pay.",
                    code="nothing_to_pay",
                )
            if amount is not None and Decimal(amount) != booking.total_amount:
                raise ValidationError(
                    "Payment amount must equal the booking total.",
                    code="amount_mismatch",
                )

            now = self.clock()
            current = lock_queryset_if_possible(
                PaymentSession.objects.filter(booking=booking, status=PaymentSession.Status.PENDING)
            ).first()
            if current is not None:
                if not current.is_overdue(now):
                    logger.info(
                        f"Reusing payment session {current.session_token[:8]} for booking {booking.booking_reference}"
                    )
                    return current
                current.mark_expired()
                current.add_event(PaymentSessionExpired(session_id=current.pk, booking_id=booking.pk))
                uow.collect_events(current)

            session = PaymentSession(
                booking=booking,
                amount=booking.total_amount,
                merchant_id=self.config.merchant_id,
                expires_at=now + timedelta(minutes=self.config.session_window_minutes),
            )
            session.payment_payload = build_upi_payload(self.config, session.amount, session.session_token)
            session.instruction_data = render_instruction(self.config, session.payment_payload)
            session.save()

            session.add_event(
                PaymentSessionCreated(
                    session_id=session.pk,
                    booking_id=booking.pk,
                    amount=session.amount,
                    expires_at=session.expires_at,
                )
            )
            uow.collect_events(session)

        logger.info(
            f"Payment session {session.session_token[:8]} created for booking {booking.booking_reference}, "
            f"amount {session.amount}, expires {session.expires_at.isoformat()}"
        )
        return session

    def verify(self, session_id: int, transaction_id: str, method: str, actor) -> Payment:
        """Record the payment, mark the session paid and confirm the booking atomically."""

        # Commits a lazy expiry before the verification transaction can fail.
        self.get(session_id)

        with DjangoUnitOfWork() as uow:
            session = lock_queryset_if_possible(PaymentSession.objects.filter(pk=session_id)).first()
            if session is None:
                raise NotFoundError(f"Payment session {session_id} not found.")
            if session.status == PaymentSession.Status.EXPIRED or session.is_overdue(self.clock()):
                raise SessionExpiredError()
            if session.status == PaymentSession.Status.PAID:
                raise AlreadyVerifiedError()
            if session.status == PaymentSession.Status.FAILED:
                raise InvalidStateError("Payment session has failed.", code="session_failed")

            booking = lock_queryset_if_possible(Booking.objects.filter(pk=session.booking_id)).get()
            booking.mark_confirmed()

            payment = Payment.objects.create(
                booking=booking,
                session=session,
                amount=session.amount,
                payment_method=method,
                transaction_id=transaction_id,
                status=Payment.Status.COMPLETED,
                verified_by=actor,
                verified_at=self.clock(),
            )
            session.mark_paid()

            session.add_event(
                PaymentVerified(
                    session_id=session.pk,
                    booking_id=booking.pk,
                    payment_id=payment.pk,
                    amount=payment.amount,
                    transaction_id=transaction_id,
                    verified_by_id=getattr(actor, "pk", None),
                )
            )
            booking.add_event(
                BookingConfirmed(
                    booking_id=booking.pk,
                    booking_reference=booking.booking_reference,
                    payment_id=payment.pk,
                )
            )
            uow.collect_events(session)
            uow.collect_events(booking)

        logger.info(
            f"Payment {payment.pk} verified for booking {booking.booking_reference} "
            f"(txn {transaction_id}, {method}) by {getattr(actor, 'pk', None)}"
        )
        return payment

    def cancel(self, session_id: int) -> PaymentSession:
        with DjangoUnitOfWork() as uow:
            session = lock_queryset_if_possible(PaymentSession.objects.filter(pk=session_id)).first()
            if session is None:
                raise NotFoundError(f"Payment session {session_id} not found.")
            session.mark_expired()
            session.add_event(PaymentSessionExpired(session_id=session.pk, booking_id=session.booking_id))
            uow.collect_events(session)
        logger.info(f"Payment session {session.session_token[:8]} cancelled")
        return session

    def mark_failed(self, session_id: int, reason: str = "") -> PaymentSession:
        with transaction.atomic():
            session = lock_queryset_if_possible(PaymentSession.objects.filter(pk=session_id)).first()
            if session is None:
                raise NotFoundError(f"Payment session {session_id} not found.")
            session.mark_failed(reason)
        logger.warning(f"Payment session {session.session_token[:8]} failed: {reason}")
        return session

    def expire_pending_for_booking(self, booking_id: int) -> int:
        count = PaymentSession.objects.filter(
            booking_id=booking_id,
            status=PaymentSession.Status.PENDING,
        ).update(status=PaymentSession.Status.EXPIRED, updated_at=self.clock())
        if count:
            logger.info(f"Expired {count} pending payment sessions of booking {booking_id}")
        return count

    def sweep_expired(self) -> int:
        """Bulk-expire pending sessions past their deadline."""

        now = self.clock()
        count = PaymentSession.objects.filter(
            status=PaymentSession.Status.PENDING,
            expires_at__lt=now,
        ).update(status=PaymentSession.Status.EXPIRED, updated_at=now)
        if count > 0:
            logger.info(f"Expired {count} overdue payment sessions")
        return count
