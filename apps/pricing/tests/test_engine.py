"""Pricing engine tests."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from apps.bookings.tests.factories import insert_booking
from apps.hotels.tests.factories import create_customer, create_hotel, create_room_type, next_monday
from apps.pricing.engine import PricingEngine
from apps.pricing.models import DayTypePricing, OccupancyPricing, SeasonalPricing
from shared.application.engine_config import EngineConfig
from shared.domain.exceptions import NotFoundError
from shared.domain.value_objects import DateRange, round2


@pytest.fixture
def engine():
    return PricingEngine(EngineConfig(gst_percentage=Decimal("18")))


@pytest.fixture
def room_type(db):
    return create_room_type(create_hotel(), base_price="2000.00", rooms=2)


def stay(start, nights):
    return DateRange(start, start + timedelta(days=nights))


@pytest.mark.django_db
def test_base_price_only_three_weekday_nights(engine, room_type):
    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(next_monday(), 3))

    assert quote.nights == 3
    assert quote.subtotal == Decimal("6000.00")
    assert quote.taxes == Decimal("1080.00")
    assert quote.total == Decimal("7080.00")
    assert quote.seasonal_multiplier == Decimal("1.00")
    assert [night.price for night in quote.nightly] == [Decimal("2000.00")] * 3


@pytest.mark.django_db
def test_weekend_multiplier_applies_to_saturday_and_sunday(engine, room_type):
    DayTypePricing.objects.create(hotel=room_type.hotel, day_type="weekend", multiplier=Decimal("1.50"))
    friday = next_monday() + timedelta(days=4)

    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(friday, 3))

    assert [night.price for night in quote.nightly] == [
        Decimal("2000.00"),
        Decimal("3000.00"),
        Decimal("3000.00"),
    ]
    assert quote.subtotal == Decimal("8000.00")
    assert quote.day_type_multiplier == Decimal("1.33")


@pytest.mark.django_db
def test_seasonal_rule_covers_inclusive_range(engine, room_type):
    monday = next_monday()
    SeasonalPricing.objects.create(
        hotel=room_type.hotel,
        name="Festival",
        start_date=monday + timedelta(days=1),
        end_date=monday + timedelta(days=1),
        multiplier=Decimal("2.00"),
    )

    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(monday, 3))

    assert [night.seasonal_multiplier for night in quote.nightly] == [
        Decimal("1.00"),
        Decimal("2.00"),
        Decimal("1.00"),
    ]
    assert quote.subtotal == Decimal("8000.00")


@pytest.mark.django_db
def test_overlapping_seasons_earliest_start_wins(engine, room_type):
    monday = next_monday()
    SeasonalPricing.objects.create(
        hotel=room_type.hotel,
        name="Late peak",
        start_date=monday + timedelta(days=1),
        end_date=monday + timedelta(days=5),
        multiplier=Decimal("3.00"),
    )
    SeasonalPricing.objects.create(
        hotel=room_type.hotel,
        name="Early peak",
        start_date=monday - timedelta(days=10),
        end_date=monday + timedelta(days=5),
        multiplier=Decimal("1.20"),
    )

    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(monday, 2))

    assert {night.seasonal_multiplier for night in quote.nightly} == {Decimal("1.20")}


@pytest.mark.django_db
def test_inactive_seasonal_rule_is_ignored(engine, room_type):
    monday = next_monday()
    SeasonalPricing.objects.create(
        hotel=room_type.hotel,
        name="Off",
        start_date=monday,
        end_date=monday + timedelta(days=5),
        multiplier=Decimal("2.00"),
        is_active=False,
    )

    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(monday, 1))

    assert quote.subtotal == Decimal("2000.00")


@pytest.mark.django_db
def test_occupancy_tier_uses_confirmed_bookings(engine, room_type):
    monday = next_monday()
    OccupancyPricing.objects.create(
        hotel=room_type.hotel, min_occupancy_pct=50, max_occupancy_pct=100, multiplier=Decimal("1.25")
    )
    insert_booking(create_customer(), room_type, monday, nights=1)

    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(monday, 2))

    assert [night.occupancy_pct for night in quote.nightly] == [50, 0]
    assert [night.price for night in quote.nightly] == [Decimal("2500.00"), Decimal("2000.00")]


@pytest.mark.django_db
def test_pending_bookings_do_not_count_as_occupancy(engine, room_type):
    monday = next_monday()
    insert_booking(create_customer(), room_type, monday, nights=1, status="pending")

    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(monday, 1))

    assert quote.nightly[0].occupancy_pct == 0


@pytest.mark.django_db
def test_subtotal_sums_unrounded_nightly_prices(engine):
    room_type = create_room_type(create_hotel(), base_price="20.03", rooms=1)
    SeasonalPricing.objects.create(
        hotel=room_type.hotel,
        name="Season",
        start_date=next_monday() - timedelta(days=1),
        end_date=next_monday() + timedelta(days=10),
        multiplier=Decimal("1.15"),
    )

    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(next_monday(), 3))

    # 23.0345 per night: each line shows 23.03, the subtotal rounds 69.1035 once.
    assert quote.nightly[0].price == Decimal("23.03")
    assert quote.subtotal == Decimal("69.10")
    assert quote.taxes == Decimal("12.44")
    assert quote.total == Decimal("81.54")


@pytest.mark.django_db
def test_discount_larger_than_subtotal_never_goes_negative(engine, room_type):
    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(next_monday(), 1), coupon_discount=Decimal("5000"))

    assert quote.discounted_subtotal == Decimal("0.00")
    assert quote.taxes == Decimal("0.00")
    assert quote.total == Decimal("0.00")


@pytest.mark.django_db
@pytest.mark.parametrize("discount", ["0", "0.01", "123.45", "999.99", "1999.99"])
def test_total_is_discounted_subtotal_plus_rounded_tax(engine, room_type, discount):
    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(next_monday(), 1), coupon_discount=Decimal(discount))

    assert quote.total == quote.discounted_subtotal + round2(quote.discounted_subtotal * Decimal("0.18"))


@pytest.mark.django_db
def test_quote_is_deterministic(engine, room_type):
    window = stay(next_monday(), 4)

    assert engine.quote(room_type.hotel_id, room_type.pk, window) == engine.quote(
        room_type.hotel_id, room_type.pk, window
    )


@pytest.mark.django_db
def test_gst_rate_comes_from_injected_config(room_type):
    engine = PricingEngine(EngineConfig(gst_percentage=Decimal("12")))

    quote = engine.quote(room_type.hotel_id, room_type.pk, stay(next_monday(), 1))

    assert quote.taxes == Decimal("240.00")
    assert quote.gst_percentage == Decimal("12")


@pytest.mark.django_db
def test_unknown_room_type_is_not_found(engine, room_type):
    with pytest.raises(NotFoundError):
        engine.quote(room_type.hotel_id, room_type.pk + 999, stay(next_monday(), 1))
