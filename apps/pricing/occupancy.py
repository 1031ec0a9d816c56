"""Occupancy reporter.

Occupancy of a hotel on a night is the share of its active rooms taken by
bookings that are confirmed or checked in on that night, as a whole
percentage. Pending bookings hold inventory for availability purposes but
do not count as occupancy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from apps.hotels.models import Room
from shared.domain.value_objects import DateRange


@dataclass(frozen=True)
class OccupancySnapshot:
    date: date
    booked_rooms: int
    total_rooms: int
    percentage: int


def occupancy_percentage(booked: int, total: int) -> int:
    """Whole percentage, halves rounded up; 0 for a hotel without rooms."""
    if total <= 0:
        return 0
    ratio = Decimal(booked) * Decimal(100) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class OccupancyReporter:
    def total_rooms(self, hotel_id: int) -> int:
        return Room.objects.active().filter(hotel_id=hotel_id).count()

    def daily_occupancy(
        self,
        hotel_id: int,
        date_range: DateRange,
        statuses: Optional[Sequence[str]] = None,
    ) -> list[OccupancySnapshot]:
        from apps.bookings.models import Booking  # Local import to prevent circular dependency

        if statuses is None:
            statuses = Booking.OCCUPYING_STATUSES

        total = self.total_rooms(hotel_id)
        stays: list[tuple[date, date]] = []
        if total:
            stays = list(
                Booking.objects.filter(
                    hotel_id=hotel_id,
                    status__in=statuses,
                    check_in_date__lt=date_range.end_date,
                    check_out_date__gt=date_range.start_date,
                ).values_list("check_in_date", "check_out_date")
            )

        snapshots = []
        for night in date_range.dates():
            booked = sum(1 for check_in, check_out in stays if check_in <= night < check_out)
            snapshots.append(
                OccupancySnapshot(
                    date=night,
                    booked_rooms=booked,
                    total_rooms=total,
                    percentage=occupancy_percentage(booked, total),
                )
            )
        return snapshots

    def occupancy_on(self, hotel_id: int, night: date) -> OccupancySnapshot:
        return self.daily_occupancy(hotel_id, DateRange(night, night + timedelta(days=1)))[0]
