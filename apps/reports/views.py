"""API views for hotel reports."""

from __future__ import annotations

from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import (
    REPORT_ROLES,
    REVENUE_REPORT_ROLES,
    ROOM_TYPE_REPORT_ROLES,
    ensure_hotel_role,
)

from .serializers import ReportPeriodSerializer
from .services import ReportService


class _HotelReportView(APIView):
    """Resolves the reporting period and checks the caller's hotel role."""

    permission_classes = [IsAuthenticated]
    roles: tuple = REPORT_ROLES
    report_method: str = ""

    def get(self, request, hotel_id: int):  # type: ignore
        ensure_hotel_role(request.user, hotel_id, self.roles)
        params = ReportPeriodSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        service = ReportService()
        period = service.period(**params.validated_data)
        return Response(getattr(service, self.report_method)(hotel_id, period))


class OccupancyReportView(_HotelReportView):
    report_method = "occupancy_report"


class RevenueReportView(_HotelReportView):
    roles = REVENUE_REPORT_ROLES
    report_method = "revenue_report"


class BookingStatsView(_HotelReportView):
    report_method = "booking_stats"


class RoomTypePerformanceView(_HotelReportView):
    roles = ROOM_TYPE_REPORT_ROLES
    report_method = "room_type_performance"
