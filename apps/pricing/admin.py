"""Admin registration for pricing rules."""

from __future__ import annotations

from django.contrib import admin

from .models import DayTypePricing, OccupancyPricing, SeasonalPricing


@admin.register(SeasonalPricing)
class SeasonalPricingAdmin(admin.ModelAdmin):
    list_display = ("name", "hotel", "start_date", "end_date", "multiplier", "is_active")
    list_filter = ("hotel", "is_active")


@admin.register(DayTypePricing)
class DayTypePricingAdmin(admin.ModelAdmin):
    list_display = ("hotel", "day_type", "multiplier")
    list_filter = ("hotel",)


@admin.register(OccupancyPricing)
class OccupancyPricingAdmin(admin.ModelAdmin):
    list_display = ("hotel", "min_occupancy_pct", "max_occupancy_pct", "multiplier")
    list_filter = ("hotel",)
