"""Hotel reports.

Every report covers an inclusive period of calendar days, defaulting to the
last 30 days. Revenue counts bookings that are confirmed, checked in or
checked out; pending, cancelled and no-show bookings earned nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

from django.db.models import Count, Sum  # type: ignore
from django.db.models.functions import TruncDate  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain import state_machine
from apps.bookings.models import Booking
from apps.hotels.models import RoomType
from apps.pricing.occupancy import OccupancyReporter
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange, round2

logger = logging.getLogger(__name__)

DEFAULT_PERIOD_DAYS = 30
EARNING_STATUSES = (state_machine.CONFIRMED, state_machine.CHECKED_IN, state_machine.CHECKED_OUT)
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class ReportPeriod:
    from_date: date
    to_date: date

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.from_date, self.to_date + timedelta(days=1))

    def as_dict(self) -> dict:
        return {"from": self.from_date.isoformat(), "to": self.to_date.isoformat()}


class ReportService:
    def __init__(self, occupancy: Optional[OccupancyReporter] = None, clock: Callable = timezone.now):
        self.occupancy = occupancy or OccupancyReporter()
        self.clock = clock

    def period(self, from_date: Optional[date] = None, to_date: Optional[date] = None) -> ReportPeriod:
        to_date = to_date or timezone.localdate(self.clock())
        from_date = from_date or to_date - timedelta(days=DEFAULT_PERIOD_DAYS)
        if from_date > to_date:
            raise ValidationError("from_date must not be after to_date.", code="invalid_period")
        return ReportPeriod(from_date, to_date)

    def _created_in(self, hotel_id: int, period: ReportPeriod):
        return Booking.objects.filter(
            hotel_id=hotel_id,
            created_at__date__gte=period.from_date,
            created_at__date__lte=period.to_date,
        )

    def occupancy_report(self, hotel_id: int, period: ReportPeriod) -> dict:
        snapshots = self.occupancy.daily_occupancy(hotel_id, period.date_range, statuses=EARNING_STATUSES)
        daily = {snap.date.isoformat(): snap.percentage for snap in snapshots}
        average = Decimal(sum(daily.values())) / Decimal(len(daily))
        return {
            "total_rooms": snapshots[0].total_rooms,
            "average_occupancy": int(average.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
            "daily_occupancy": daily,
            "period": period.as_dict(),
        }

    def revenue_report(self, hotel_id: int, period: ReportPeriod) -> dict:
        bookings = self._created_in(hotel_id, period).filter(status__in=EARNING_STATUSES)
        totals = bookings.aggregate(
            revenue=Sum("total_amount"),
            taxes=Sum("taxes"),
            discounts=Sum("coupon_discount"),
            count=Count("id"),
        )
        revenue = totals["revenue"] or ZERO
        count = totals["count"] or 0
        daily = (
            bookings.annotate(day=TruncDate("created_at"))
            .values("day")
            .annotate(total=Sum("total_amount"))
            .order_by("day")
        )
        return {
            "total_revenue": str(round2(revenue)),
            "total_taxes": str(round2(totals["taxes"] or ZERO)),
            "total_discounts": str(round2(totals["discounts"] or ZERO)),
            "booking_count": count,
            "average_booking_value": str(round2(revenue / count)) if count else str(ZERO),
            "daily_revenue": {row["day"].isoformat(): str(round2(row["total"])) for row in daily},
            "period": period.as_dict(),
        }

    def booking_stats(self, hotel_id: int, period: ReportPeriod) -> dict:
        bookings = self._created_in(hotel_id, period)
        by_status = {
            row["status"]: row["count"]
            for row in bookings.values("status").annotate(count=Count("id")).order_by("status")
        }
        daily = (
            bookings.annotate(day=TruncDate("created_at"))
            .values("day")
            .annotate(count=Count("id"))
            .order_by("day")
        )
        return {
            "total_bookings": sum(by_status.values()),
            "by_status": by_status,
            "daily_bookings": {row["day"].isoformat(): row["count"] for row in daily},
            "period": period.as_dict(),
        }

    def room_type_performance(self, hotel_id: int, period: ReportPeriod) -> dict:
        stats = {
            row["room_type_id"]: row
            for row in self._created_in(hotel_id, period)
            .filter(status__in=EARNING_STATUSES)
            .values("room_type_id")
            .annotate(count=Count("id"), revenue=Sum("total_amount"))
            .order_by()
        }
        performance = []
        for room_type in RoomType.objects.filter(hotel_id=hotel_id, is_active=True).order_by("name"):
            row = stats.get(room_type.pk, {})
            performance.append(
                {
                    "room_type_id": room_type.pk,
                    "name": room_type.name,
                    "base_price": str(room_type.base_price),
                    "booking_count": row.get("count", 0),
                    "total_revenue": str(round2(row.get("revenue") or ZERO)),
                }
            )
        return {"room_types": performance, "period": period.as_dict()}
