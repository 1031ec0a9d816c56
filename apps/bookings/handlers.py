"""Booking event handlers."""

from __future__ import annotations

import logging

from shared.application.message_bus import message_bus

from .domain.events import (
    BookingCancelled,
    BookingCheckedIn,
    BookingCheckedOut,
    BookingConfirmed,
    BookingCreated,
)

logger = logging.getLogger(__name__)


def log_booking_event(event) -> None:
    logger.info(f"[EVENT] {event.__class__.__name__}: {event.to_dict()}")


def register() -> None:
    for event_type in (
        BookingCreated,
        BookingConfirmed,
        BookingCheckedIn,
        BookingCheckedOut,
        BookingCancelled,
    ):
        message_bus.register_event_handler(event_type, log_booking_event)
