"""Coupon validation and redemption.

Checks run in a fixed order and stop at the first failure:

1. the code exists, is active and not deleted      -> INVALID_CODE
2. now is within [valid_from, valid_until]          -> EXPIRED_OR_NOT_YET_VALID
3. the coupon is global or belongs to the hotel     -> WRONG_HOTEL
4. used_count < usage_limit (when a limit is set)   -> LIMIT_REACHED
5. booking amount >= min_booking_amount             -> BELOW_MINIMUM
6. the user has not redeemed it before              -> ALREADY_USED
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional

from django.db import transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.engine_config import EngineConfig
from shared.domain.exceptions import CouponError
from shared.domain.value_objects import round2

from .models import Coupon, CouponUsage

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class CouponRejection(str, Enum):
    INVALID_CODE = "INVALID_CODE"
    EXPIRED_OR_NOT_YET_VALID = "EXPIRED_OR_NOT_YET_VALID"
    WRONG_HOTEL = "WRONG_HOTEL"
    LIMIT_REACHED = "LIMIT_REACHED"
    BELOW_MINIMUM = "BELOW_MINIMUM"
    ALREADY_USED = "ALREADY_USED"


@dataclass(frozen=True)
class CouponValidation:
    valid: bool
    discount_amount: Decimal = ZERO
    reason: Optional[CouponRejection] = None
    coupon: Optional[Coupon] = None

    @property
    def message(self) -> Optional[str]:
        if self.reason is None:
            return None
        return CouponError.MESSAGES[self.reason.value]

    def raise_if_invalid(self) -> "CouponValidation":
        if not self.valid:
            raise CouponError(self.reason.value)
        return self

    def as_dict(self) -> dict:
        data = {
            "valid": self.valid,
            "discount_amount": str(self.discount_amount),
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
        }
        if self.coupon is not None and self.valid:
            data["coupon"] = {
                "id": self.coupon.pk,
                "code": self.coupon.code,
                "discount_type": self.coupon.discount_type,
                "discount_value": str(self.coupon.discount_value),
                "max_discount": str(self.coupon.max_discount) if self.coupon.max_discount is not None else None,
            }
        return data


def _reject(reason: CouponRejection, coupon: Optional[Coupon] = None) -> CouponValidation:
    return CouponValidation(valid=False, reason=reason, coupon=coupon)


def compute_discount(coupon: Coupon, amount: Decimal) -> Decimal:
    """Discount for ``amount``, clamped to [0, amount]."""

    amount = Decimal(amount)
    if amount <= 0:
        return ZERO
    if coupon.discount_type == Coupon.DiscountType.PERCENTAGE:
        discount = amount * coupon.discount_value / Decimal("100")
        if coupon.max_discount is not None:
            discount = min(discount, coupon.max_discount)
    else:
        discount = coupon.discount_value
    return round2(max(ZERO, min(discount, amount)))


class CouponValidator:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Callable = timezone.now,
    ):
        self.config = config or EngineConfig.from_settings()
        self.clock = clock

    def lookup(self, code: str) -> Optional[Coupon]:
        normalized = (code or "").strip().upper()
        if not normalized:
            return None
        return Coupon.objects.live().filter(code=normalized).first()

    def validate(
        self,
        code: str,
        hotel_id: int,
        booking_amount: Optional[Decimal],
        user=None,
    ) -> CouponValidation:
        """Validate ``code``.

        ``booking_amount=None`` is an eligibility probe: every check except
        the minimum amount runs and no discount is computed. Booking creation
        probes before it knows the subtotal, then validates again with it.
        """
        coupon = self.lookup(code)
        if coupon is None:
            return _reject(CouponRejection.INVALID_CODE)

        now = self.clock()
        if now < coupon.valid_from or now > coupon.valid_until:
            return _reject(CouponRejection.EXPIRED_OR_NOT_YET_VALID, coupon)

        if coupon.hotel_id is not None and coupon.hotel_id != hotel_id:
            return _reject(CouponRejection.WRONG_HOTEL, coupon)

        if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
            return _reject(CouponRejection.LIMIT_REACHED, coupon)

        if booking_amount is not None and Decimal(booking_amount) < coupon.min_booking_amount:
            return _reject(CouponRejection.BELOW_MINIMUM, coupon)

        if self._already_used(coupon, user):
            return _reject(CouponRejection.ALREADY_USED, coupon)

        discount = ZERO if booking_amount is None else compute_discount(coupon, booking_amount)
        return CouponValidation(valid=True, discount_amount=discount, coupon=coupon)

    def _already_used(self, coupon: Coupon, user) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        if not self.config.coupon_single_use_per_user:
            return False
        return CouponUsage.objects.filter(coupon=coupon, user=user).exists()

    @transaction.atomic
    def record_usage(self, coupon: Coupon, user, booking, discount_amount: Decimal) -> CouponUsage:
        """Redeem ``coupon`` for ``booking``.

        The coupon row is locked while the limit and per-user rule are
        re-checked, so concurrent redemptions cannot overshoot usage_limit.
        Runs inside the caller's transaction when there is one.
        """
        locked = Coupon.objects.select_for_update().get(pk=coupon.pk)
        if locked.usage_limit is not None and locked.used_count >= locked.usage_limit:
            raise CouponError(CouponRejection.LIMIT_REACHED.value)
        if self._already_used(locked, user):
            raise CouponError(CouponRejection.ALREADY_USED.value)

        usage = CouponUsage.objects.create(
            coupon=locked,
            user=user,
            booking=booking,
            discount_amount=round2(discount_amount),
        )
        Coupon.objects.filter(pk=locked.pk).update(used_count=F("used_count") + 1)
        logger.info(
            f"Coupon {locked.code} redeemed by user {user.pk} for booking {booking.pk}: {usage.discount_amount}"
        )
        return usage
