"""Coupon validation and redemption tests."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.bookings.tests.factories import insert_booking
from apps.coupons.models import Coupon, CouponUsage
from apps.coupons.validator import CouponRejection, CouponValidator, compute_discount
from apps.hotels.tests.factories import create_customer, create_hotel, create_room_type, next_monday
from shared.application.engine_config import EngineConfig
from shared.domain.exceptions import CouponError

from .factories import create_coupon


@pytest.fixture
def hotel(db):
    return create_hotel()


@pytest.fixture
def validator():
    return CouponValidator(EngineConfig(gst_percentage=Decimal("18")))


def test_percentage_discount_is_capped():
    coupon = Coupon(
        discount_type=Coupon.DiscountType.PERCENTAGE,
        discount_value=Decimal("10"),
        max_discount=Decimal("300"),
    )

    assert compute_discount(coupon, Decimal("6000.00")) == Decimal("300.00")
    assert compute_discount(coupon, Decimal("2000.00")) == Decimal("200.00")


def test_fixed_discount_never_exceeds_amount():
    coupon = Coupon(discount_type=Coupon.DiscountType.FIXED, discount_value=Decimal("500"))

    assert compute_discount(coupon, Decimal("350.00")) == Decimal("350.00")
    assert compute_discount(coupon, Decimal("0")) == Decimal("0.00")


@pytest.mark.django_db
def test_code_lookup_is_case_insensitive(validator, hotel):
    create_coupon("SAVE10")

    result = validator.validate(" save10 ", hotel.pk, Decimal("6000.00"))

    assert result.valid
    assert result.discount_amount == Decimal("300.00")


@pytest.mark.django_db
def test_unknown_and_inactive_codes_are_invalid(validator, hotel):
    create_coupon("OFF", is_active=False)

    assert validator.validate("MISSING", hotel.pk, Decimal("100")).reason == CouponRejection.INVALID_CODE
    assert validator.validate("OFF", hotel.pk, Decimal("100")).reason == CouponRejection.INVALID_CODE


@pytest.mark.django_db
def test_validity_window(hotel):
    now = timezone.now()
    create_coupon("LATER", valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=5))
    create_coupon("GONE", valid_from=now - timedelta(days=5), valid_until=now - timedelta(days=1))
    validator = CouponValidator(EngineConfig(gst_percentage=Decimal("18")), clock=lambda: now)

    assert validator.validate("LATER", hotel.pk, Decimal("100")).reason == CouponRejection.EXPIRED_OR_NOT_YET_VALID
    assert validator.validate("GONE", hotel.pk, Decimal("100")).reason == CouponRejection.EXPIRED_OR_NOT_YET_VALID


@pytest.mark.django_db
def test_hotel_scoped_coupon_rejects_other_hotels(validator, hotel):
    create_coupon("LOCAL", hotel=hotel)
    other = create_hotel(name="Hill View")

    assert validator.validate("LOCAL", hotel.pk, Decimal("100")).valid
    assert validator.validate("LOCAL", other.pk, Decimal("100")).reason == CouponRejection.WRONG_HOTEL


@pytest.mark.django_db
def test_usage_limit_reached(validator, hotel):
    create_coupon("ONCE", usage_limit=1, used_count=1)

    assert validator.validate("ONCE", hotel.pk, Decimal("100")).reason == CouponRejection.LIMIT_REACHED


@pytest.mark.django_db
def test_minimum_booking_amount(validator, hotel):
    create_coupon("BIG", min_booking_amount=Decimal("5000"))

    result = validator.validate("BIG", hotel.pk, Decimal("4999.99"))

    assert not result.valid
    assert result.reason == CouponRejection.BELOW_MINIMUM
    assert validator.validate("BIG", hotel.pk, None).valid


@pytest.mark.django_db
def test_rejection_raises_coupon_error_with_reason(validator, hotel):
    with pytest.raises(CouponError) as excinfo:
        validator.validate("MISSING", hotel.pk, Decimal("100")).raise_if_invalid()

    assert excinfo.value.code == "INVALID_CODE"


@pytest.mark.django_db
def test_record_usage_counts_and_blocks_second_use(validator, hotel):
    coupon = create_coupon("SAVE10")
    user = create_customer()
    booking = insert_booking(user, create_room_type(hotel), next_monday())

    usage = validator.record_usage(coupon, user, booking, Decimal("150.004"))

    coupon.refresh_from_db()
    assert coupon.used_count == 1
    assert usage.discount_amount == Decimal("150.00")
    assert validator.validate("SAVE10", hotel.pk, Decimal("100"), user=user).reason == CouponRejection.ALREADY_USED
    assert validator.validate("SAVE10", hotel.pk, Decimal("100"), user=create_customer()).valid


@pytest.mark.django_db
def test_record_usage_respects_limit(validator, hotel):
    coupon = create_coupon("LAST", usage_limit=1)
    room_type = create_room_type(hotel)
    first = create_customer()
    validator.record_usage(coupon, first, insert_booking(first, room_type, next_monday()), Decimal("10"))

    second = create_customer()
    with pytest.raises(CouponError) as excinfo:
        validator.record_usage(coupon, second, insert_booking(second, room_type, next_monday()), Decimal("10"))

    assert excinfo.value.code == "LIMIT_REACHED"
    assert CouponUsage.objects.filter(coupon=coupon).count() == 1
