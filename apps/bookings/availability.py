"""Availability checker.

Reservations hold room-type inventory, not specific rooms. A room type is
available for a stay while the number of holding bookings (pending,
confirmed, checked in) overlapping the stay is below the number of active
rooms of that type. Two stays overlap when

    existing.check_in < candidate.check_out AND existing.check_out > candidate.check_in

so a check-out day is free for the next arrival.
"""

from __future__ import annotations

import logging
from typing import Optional

from django.db.models import Q  # type: ignore

from apps.hotels.models import Room
from shared.domain.exceptions import CapacityError
from shared.domain.value_objects import DateRange

from .models import Booking

logger = logging.getLogger(__name__)


class AvailabilityChecker:
    def active_rooms(self, hotel_id: int, room_type_id: int) -> int:
        return Room.objects.active().filter(hotel_id=hotel_id, room_type_id=room_type_id).count()

    def overlapping_holds(
        self,
        hotel_id: int,
        room_type_id: int,
        stay: DateRange,
        exclude_booking_id: Optional[int] = None,
    ) -> int:
        overlapping_filter = Q(check_in_date__lt=stay.end_date) & Q(check_out_date__gt=stay.start_date)
        bookings_qs = Booking.objects.filter(
            hotel_id=hotel_id,
            room_type_id=room_type_id,
            status__in=Booking.HOLDING_STATUSES,
        ).filter(overlapping_filter)
        if exclude_booking_id is not None:
            bookings_qs = bookings_qs.exclude(pk=exclude_booking_id)
        return bookings_qs.count()

    def available_count(
        self,
        hotel_id: int,
        room_type_id: int,
        stay: DateRange,
        exclude_booking_id: Optional[int] = None,
    ) -> int:
        total = self.active_rooms(hotel_id, room_type_id)
        if total == 0:
            return 0
        holds = self.overlapping_holds(hotel_id, room_type_id, stay, exclude_booking_id)
        return max(0, total - holds)

    def is_available(self, hotel_id: int, room_type_id: int, stay: DateRange) -> bool:
        return self.available_count(hotel_id, room_type_id, stay) > 0

    def ensure_available(self, hotel_id: int, room_type_id: int, stay: DateRange) -> None:
        if not self.is_available(hotel_id, room_type_id, stay):
            logger.warning(f"No availability for room type {room_type_id} of hotel {hotel_id} for {stay}")
            raise CapacityError()
