"""Pricing rule administration and coupon-aware quoting."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional

from django.db import transaction  # type: ignore

from apps.coupons.validator import CouponValidation, CouponValidator
from apps.hotels.models import Hotel
from shared.domain.exceptions import NotFoundError
from shared.domain.value_objects import DateRange

from .engine import PriceBreakdown, PricingEngine
from .models import DayTypePricing, OccupancyPricing, SeasonalPricing

logger = logging.getLogger(__name__)


def get_hotel(hotel_id: int) -> Hotel:
    try:
        return Hotel.objects.get(pk=hotel_id)
    except Hotel.DoesNotExist:
        raise NotFoundError(f"Hotel {hotel_id} not found.")


def get_pricing_config(hotel_id: int) -> dict:
    get_hotel(hotel_id)
    return {
        "seasonal": list(
            SeasonalPricing.objects.filter(hotel_id=hotel_id).order_by("start_date", "id")
        ),
        "day_types": list(DayTypePricing.objects.filter(hotel_id=hotel_id)),
        "occupancy_tiers": list(
            OccupancyPricing.objects.filter(hotel_id=hotel_id).order_by("min_occupancy_pct", "id")
        ),
    }


@transaction.atomic
def replace_seasonal_rules(hotel_id: int, rules: Iterable[dict]) -> list[SeasonalPricing]:
    """Delete every seasonal rule of the hotel and insert ``rules``."""

    get_hotel(hotel_id)
    SeasonalPricing.objects.filter(hotel_id=hotel_id).delete()
    created = SeasonalPricing.objects.bulk_create(
        SeasonalPricing(hotel_id=hotel_id, **rule) for rule in rules
    )
    logger.info(f"Replaced seasonal pricing of hotel {hotel_id} with {len(created)} rules")
    return created


@transaction.atomic
def replace_occupancy_tiers(hotel_id: int, tiers: Iterable[dict]) -> list[OccupancyPricing]:
    get_hotel(hotel_id)
    OccupancyPricing.objects.filter(hotel_id=hotel_id).delete()
    created = OccupancyPricing.objects.bulk_create(
        OccupancyPricing(hotel_id=hotel_id, **tier) for tier in tiers
    )
    logger.info(f"Replaced occupancy pricing of hotel {hotel_id} with {len(created)} tiers")
    return created


@transaction.atomic
def replace_day_type_multipliers(hotel_id: int, rules: Iterable[dict]) -> list[DayTypePricing]:
    get_hotel(hotel_id)
    DayTypePricing.objects.filter(hotel_id=hotel_id).delete()
    created = DayTypePricing.objects.bulk_create(
        DayTypePricing(hotel_id=hotel_id, **rule) for rule in rules
    )
    logger.info(f"Replaced day type pricing of hotel {hotel_id} with {len(created)} rules")
    return created


def quote_price(
    hotel_id: int,
    room_type_id: int,
    stay: DateRange,
    coupon_code: Optional[str] = None,
    user=None,
    engine: Optional[PricingEngine] = None,
    validator: Optional[CouponValidator] = None,
) -> tuple[PriceBreakdown, Optional[CouponValidation]]:
    """Quote a stay, applying ``coupon_code`` to the discount-free subtotal.

    An invalid coupon raises CouponError instead of being dropped silently.
    """

    engine = engine or PricingEngine()
    quote = engine.quote(hotel_id, room_type_id, stay)
    if not coupon_code:
        return quote, None

    validator = validator or CouponValidator(config=engine.config)
    validation = validator.validate(coupon_code, hotel_id, quote.subtotal, user=user).raise_if_invalid()
    if validation.discount_amount > Decimal("0"):
        quote = engine.quote(hotel_id, room_type_id, stay, coupon_discount=validation.discount_amount)
    return quote, validation
