"""URL routing for reports."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import BookingStatsView, OccupancyReportView, RevenueReportView, RoomTypePerformanceView

urlpatterns = [
    path("hotels/<int:hotel_id>/occupancy/", OccupancyReportView.as_view(), name="report-occupancy"),
    path("hotels/<int:hotel_id>/revenue/", RevenueReportView.as_view(), name="report-revenue"),
    path("hotels/<int:hotel_id>/bookings/", BookingStatsView.as_view(), name="report-bookings"),
    path("hotels/<int:hotel_id>/room-types/", RoomTypePerformanceView.as_view(), name="report-room-types"),
]
