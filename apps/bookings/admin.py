"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, BookingGuest


class BookingGuestInline(admin.TabularInline):
    model = BookingGuest
    extra = 0


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_reference",
        "hotel",
        "room_type",
        "room",
        "guest_name",
        "status",
        "check_in_date",
        "check_out_date",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "hotel", "check_in_date", "check_out_date")
    search_fields = ("booking_reference", "guest_name", "guest_email", "user__email")
    inlines = [BookingGuestInline]
    readonly_fields = (
        "booking_reference",
        "base_price",
        "seasonal_multiplier",
        "day_type_multiplier",
        "occupancy_multiplier",
        "subtotal",
        "coupon",
        "coupon_discount",
        "taxes",
        "total_amount",
        "created_at",
        "updated_at",
    )
