"""Admin registration for coupons."""

from __future__ import annotations

from django.contrib import admin

from .models import Coupon, CouponUsage


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "hotel",
        "discount_type",
        "discount_value",
        "used_count",
        "usage_limit",
        "valid_from",
        "valid_until",
        "is_active",
    )
    list_filter = ("discount_type", "is_active", "hotel")
    search_fields = ("code", "description")
    readonly_fields = ("used_count", "created_at", "updated_at")


@admin.register(CouponUsage)
class CouponUsageAdmin(admin.ModelAdmin):
    list_display = ("coupon", "user", "booking", "discount_amount", "used_at")
    search_fields = ("coupon__code", "user__email")
    readonly_fields = ("used_at",)
