"""Pricing engine.

For every night of a stay the nightly price is

    base_price × seasonal × day_type × occupancy

where each multiplier defaults to 1.00 when no rule applies. Nightly
prices are summed unrounded and the subtotal is rounded once; GST is
charged on the subtotal after the coupon discount.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from apps.hotels.models import RoomType
from shared.application.engine_config import EngineConfig
from shared.domain.exceptions import NotFoundError, ValidationError
from shared.domain.value_objects import DateRange, round2

from .models import DayTypePricing, OccupancyPricing, SeasonalPricing
from .occupancy import OccupancyReporter

logger = logging.getLogger(__name__)

ONE = Decimal("1.00")
ZERO = Decimal("0.00")
WEEKEND_DAYS = (5, 6)  # date.weekday(): Saturday, Sunday


@dataclass(frozen=True)
class NightlyRate:
    date: date
    seasonal_multiplier: Decimal
    day_type_multiplier: Decimal
    occupancy_multiplier: Decimal
    occupancy_pct: int
    price: Decimal

    def as_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "seasonal_multiplier": str(self.seasonal_multiplier),
            "day_type_multiplier": str(self.day_type_multiplier),
            "occupancy_multiplier": str(self.occupancy_multiplier),
            "occupancy_pct": self.occupancy_pct,
            "price": str(self.price),
        }


@dataclass(frozen=True)
class PriceBreakdown:
    hotel_id: int
    room_type_id: int
    check_in: date
    check_out: date
    nights: int
    base_price: Decimal
    seasonal_multiplier: Decimal
    day_type_multiplier: Decimal
    occupancy_multiplier: Decimal
    subtotal: Decimal
    coupon_discount: Decimal
    discounted_subtotal: Decimal
    gst_percentage: Decimal
    taxes: Decimal
    total: Decimal
    currency: str
    nightly: Sequence[NightlyRate] = field(default_factory=tuple)

    def as_dict(self) -> dict:
        return {
            "hotel_id": self.hotel_id,
            "room_type_id": self.room_type_id,
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
            "nights": self.nights,
            "base_price": str(self.base_price),
            "seasonal_multiplier": str(self.seasonal_multiplier),
            "day_type_multiplier": str(self.day_type_multiplier),
            "occupancy_multiplier": str(self.occupancy_multiplier),
            "subtotal": str(self.subtotal),
            "coupon_discount": str(self.coupon_discount),
            "discounted_subtotal": str(self.discounted_subtotal),
            "gst_percentage": str(self.gst_percentage),
            "taxes": str(self.taxes),
            "total": str(self.total),
            "currency": self.currency,
            "nightly": [night.as_dict() for night in self.nightly],
        }


class PricingRules:
    """A hotel's rule tables loaded once for the duration of a quote."""

    def __init__(self, seasonal, day_types, tiers):
        self.seasonal = list(seasonal)
        self.day_types = {rule.day_type: rule.multiplier for rule in day_types}
        self.tiers = list(tiers)

    @classmethod
    def load(cls, hotel_id: int) -> "PricingRules":
        return cls(
            SeasonalPricing.objects.filter(hotel_id=hotel_id, is_active=True).order_by("start_date", "id"),
            DayTypePricing.objects.filter(hotel_id=hotel_id),
            OccupancyPricing.objects.filter(hotel_id=hotel_id).order_by("min_occupancy_pct", "id"),
        )

    def seasonal_multiplier(self, night: date) -> Decimal:
        # Overlapping seasons: the earliest starting rule wins.
        for rule in self.seasonal:
            if rule.start_date <= night <= rule.end_date:
                return rule.multiplier
        return ONE

    def day_type_multiplier(self, night: date) -> Decimal:
        day_type = (
            DayTypePricing.DayType.WEEKEND
            if night.weekday() in WEEKEND_DAYS
            else DayTypePricing.DayType.WEEKDAY
        )
        return self.day_types.get(day_type, ONE)

    def occupancy_multiplier(self, occupancy_pct: int) -> Decimal:
        for tier in self.tiers:
            if tier.min_occupancy_pct <= occupancy_pct <= tier.max_occupancy_pct:
                return tier.multiplier
        return ONE


class PricingEngine:
    """Computes a PriceBreakdown for a room type and stay."""

    def __init__(self, config: Optional[EngineConfig] = None, occupancy: Optional[OccupancyReporter] = None):
        self.config = config or EngineConfig.from_settings()
        self.occupancy = occupancy or OccupancyReporter()

    def get_room_type(self, hotel_id: int, room_type_id: int) -> RoomType:
        try:
            return RoomType.objects.get(pk=room_type_id, hotel_id=hotel_id, is_active=True)
        except RoomType.DoesNotExist:
            raise NotFoundError(f"Room type {room_type_id} not found for hotel {hotel_id}.")

    def quote(
        self,
        hotel_id: int,
        room_type_id: int,
        stay: DateRange,
        coupon_discount: Decimal = ZERO,
        room_type: Optional[RoomType] = None,
    ) -> PriceBreakdown:
        if stay.nights <= 0:
            raise ValidationError("Stay must be at least one night.", code="invalid_dates")
        if room_type is None:
            room_type = self.get_room_type(hotel_id, room_type_id)

        rules = PricingRules.load(hotel_id)
        occupancy = {snap.date: snap.percentage for snap in self.occupancy.daily_occupancy(hotel_id, stay)}

        nightly: list[NightlyRate] = []
        running_total = ZERO
        for night in stay.dates():
            seasonal = rules.seasonal_multiplier(night)
            day_type = rules.day_type_multiplier(night)
            occupancy_pct = occupancy.get(night, 0)
            occupancy_mult = rules.occupancy_multiplier(occupancy_pct)

            price = room_type.base_price * seasonal * day_type * occupancy_mult
            running_total += price
            nightly.append(
                NightlyRate(
                    date=night,
                    seasonal_multiplier=seasonal,
                    day_type_multiplier=day_type,
                    occupancy_multiplier=occupancy_mult,
                    occupancy_pct=occupancy_pct,
                    price=round2(price),
                )
            )

        nights = len(nightly)
        subtotal = round2(running_total)
        discount = round2(max(ZERO, Decimal(coupon_discount)))
        discounted = max(ZERO, subtotal - discount)
        taxes = round2(discounted * self.config.gst_rate)

        breakdown = PriceBreakdown(
            hotel_id=hotel_id,
            room_type_id=room_type.pk,
            check_in=stay.start_date,
            check_out=stay.end_date,
            nights=nights,
            base_price=room_type.base_price,
            seasonal_multiplier=round2(sum(n.seasonal_multiplier for n in nightly) / nights),
            day_type_multiplier=round2(sum(n.day_type_multiplier for n in nightly) / nights),
            occupancy_multiplier=round2(sum(n.occupancy_multiplier for n in nightly) / nights),
            subtotal=subtotal,
            coupon_discount=min(discount, subtotal),
            discounted_subtotal=discounted,
            gst_percentage=self.config.gst_percentage,
            taxes=taxes,
            total=round2(discounted + taxes),
            currency=self.config.currency,
            nightly=tuple(nightly),
        )
        logger.debug(
            f"Quoted room type {room_type.pk} for {stay}: subtotal {subtotal}, total {breakdown.total}"
        )
        return breakdown
