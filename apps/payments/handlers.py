"""Payment event handlers."""

from __future__ import annotations

import logging

from apps.bookings.domain.events import BookingCancelled
from shared.application.message_bus import message_bus

from .domain.events import PaymentSessionCreated, PaymentSessionExpired, PaymentVerified

logger = logging.getLogger(__name__)


def log_payment_event(event) -> None:
    logger.info(f"[EVENT] {event.__class__.__name__}: {event.to_dict()}")


def expire_sessions_of_cancelled_booking(event: BookingCancelled) -> None:
    """A cancelled booking can no longer be paid for."""
    from .services import PaymentSessionManager

    PaymentSessionManager().expire_pending_for_booking(event.booking_id)


def register() -> None:
    for event_type in (PaymentSessionCreated, PaymentSessionExpired, PaymentVerified):
        message_bus.register_event_handler(event_type, log_payment_event)
    message_bus.register_event_handler(BookingCancelled, expire_sessions_of_cancelled_booking)
