"""Pricing API views."""

from __future__ import annotations

from datetime import date

from django.utils import timezone  # type: ignore
from rest_framework import permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import PRICING_ADMIN_ROLES, STAFF_ROLES, ensure_hotel_role
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange

from .occupancy import OccupancyReporter
from .serializers import (
    DayTypeListSerializer,
    DayTypePricingSerializer,
    OccupancyPricingSerializer,
    QuoteRequestSerializer,
    SeasonalPricingSerializer,
)
from .services import (
    get_hotel,
    get_pricing_config,
    quote_price,
    replace_day_type_multipliers,
    replace_occupancy_tiers,
    replace_seasonal_rules,
)


def _serialize_config(config: dict) -> dict:
    return {
        "seasonal": SeasonalPricingSerializer(config["seasonal"], many=True).data,
        "day_types": DayTypePricingSerializer(config["day_types"], many=True).data,
        "occupancy_tiers": OccupancyPricingSerializer(config["occupancy_tiers"], many=True).data,
    }


class QuoteView(APIView):
    """Price a stay; open to guests before they sign in."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = QuoteRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        quote, coupon = quote_price(
            data["hotel_id"],
            data["room_type_id"],
            DateRange(data["check_in"], data["check_out"]),
            coupon_code=data.get("coupon_code") or None,
            user=request.user,
        )
        body = quote.as_dict()
        body["coupon"] = coupon.as_dict() if coupon is not None else None
        return Response(body)


class PricingConfigView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, hotel_id: int):  # type: ignore
        ensure_hotel_role(request.user, hotel_id, STAFF_ROLES)
        return Response(_serialize_config(get_pricing_config(hotel_id)))


class OccupancyView(APIView):
    """Current (or ``?date=``) occupancy percentage of a hotel."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, hotel_id: int):  # type: ignore
        ensure_hotel_role(request.user, hotel_id, STAFF_ROLES)
        get_hotel(hotel_id)
        raw = request.query_params.get("date")
        try:
            night = date.fromisoformat(raw) if raw else timezone.localdate()
        except ValueError:
            raise ValidationError("date must be in YYYY-MM-DD format.", code="invalid_date")
        snapshot = OccupancyReporter().occupancy_on(hotel_id, night)
        return Response(
            {
                "hotel_id": hotel_id,
                "date": snapshot.date.isoformat(),
                "booked_rooms": snapshot.booked_rooms,
                "total_rooms": snapshot.total_rooms,
                "occupancy_pct": snapshot.percentage,
            }
        )


class _ReplaceRulesView(APIView):
    """PUT replaces the hotel's whole rule table with the submitted list."""

    permission_classes = [permissions.IsAuthenticated]
    replace = None

    def get_list_serializer(self, data):  # type: ignore
        raise NotImplementedError

    def put(self, request, hotel_id: int):  # type: ignore
        ensure_hotel_role(request.user, hotel_id, PRICING_ADMIN_ROLES)
        payload = request.data.get("rules", request.data) if isinstance(request.data, dict) else request.data
        serializer = self.get_list_serializer(payload)
        serializer.is_valid(raise_exception=True)
        self.replace(hotel_id, serializer.validated_data)
        return Response(_serialize_config(get_pricing_config(hotel_id)))


class SeasonalRulesView(_ReplaceRulesView):
    replace = staticmethod(replace_seasonal_rules)

    def get_list_serializer(self, data):  # type: ignore
        return SeasonalPricingSerializer(data=data, many=True)


class OccupancyTiersView(_ReplaceRulesView):
    replace = staticmethod(replace_occupancy_tiers)

    def get_list_serializer(self, data):  # type: ignore
        return OccupancyPricingSerializer(data=data, many=True)


class DayTypeRulesView(_ReplaceRulesView):
    replace = staticmethod(replace_day_type_multipliers)

    def get_list_serializer(self, data):  # type: ignore
        return DayTypeListSerializer(data=data)
