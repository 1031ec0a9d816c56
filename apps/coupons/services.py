"""Coupon administration helpers."""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Count, Sum  # type: ignore

from .models import Coupon


def coupon_stats(coupon: Coupon) -> dict:
    """Redemption totals for a coupon."""

    totals = coupon.usages.aggregate(
        total_uses=Count("id"),
        total_discount=Sum("discount_amount"),
        unique_users=Count("user", distinct=True),
    )
    return {
        "coupon_id": coupon.pk,
        "code": coupon.code,
        "used_count": coupon.used_count,
        "usage_limit": coupon.usage_limit,
        "total_uses": totals["total_uses"] or 0,
        "total_discount": str(totals["total_discount"] or Decimal("0.00")),
        "unique_users": totals["unique_users"] or 0,
    }
