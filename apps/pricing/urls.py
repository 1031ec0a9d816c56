"""URL routing for pricing."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    DayTypeRulesView,
    OccupancyTiersView,
    OccupancyView,
    PricingConfigView,
    QuoteView,
    SeasonalRulesView,
)

urlpatterns = [
    path("quote/", QuoteView.as_view(), name="pricing-quote"),
    path("hotels/<int:hotel_id>/config/", PricingConfigView.as_view(), name="pricing-config"),
    path("hotels/<int:hotel_id>/occupancy/", OccupancyView.as_view(), name="pricing-occupancy"),
    path("hotels/<int:hotel_id>/seasonal/", SeasonalRulesView.as_view(), name="pricing-seasonal"),
    path(
        "hotels/<int:hotel_id>/occupancy-tiers/",
        OccupancyTiersView.as_view(),
        name="pricing-occupancy-tiers",
    ),
    path("hotels/<int:hotel_id>/day-types/", DayTypeRulesView.as_view(), name="pricing-day-types"),
]
