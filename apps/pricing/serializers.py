"""Serializers for pricing rules and quotes."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .models import DayTypePricing, OccupancyPricing, SeasonalPricing

MULTIPLIER_KWARGS = {"max_digits": 4, "decimal_places": 2, "min_value": Decimal("0.01")}


class SeasonalPricingSerializer(serializers.ModelSerializer):
    multiplier = serializers.DecimalField(**MULTIPLIER_KWARGS)

    class Meta:
        model = SeasonalPricing
        fields = ["id", "name", "start_date", "end_date", "multiplier", "is_active"]
        read_only_fields = ["id"]

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "end_date must not precede start_date."})
        return attrs


class DayTypePricingSerializer(serializers.ModelSerializer):
    multiplier = serializers.DecimalField(**MULTIPLIER_KWARGS)

    class Meta:
        model = DayTypePricing
        fields = ["id", "day_type", "multiplier"]
        read_only_fields = ["id"]
        # Uniqueness per hotel is checked on the whole list.
        validators = []


class OccupancyPricingSerializer(serializers.ModelSerializer):
    multiplier = serializers.DecimalField(**MULTIPLIER_KWARGS)
    min_occupancy_pct = serializers.IntegerField(min_value=0, max_value=100)
    max_occupancy_pct = serializers.IntegerField(min_value=0, max_value=100)

    class Meta:
        model = OccupancyPricing
        fields = ["id", "min_occupancy_pct", "max_occupancy_pct", "multiplier"]
        read_only_fields = ["id"]

    def validate(self, attrs):  # type: ignore
        if attrs["min_occupancy_pct"] > attrs["max_occupancy_pct"]:
            raise serializers.ValidationError(
                {"max_occupancy_pct": "max_occupancy_pct must be at least min_occupancy_pct."}
            )
        return attrs


class DayTypeListSerializer(serializers.ListSerializer):
    child = DayTypePricingSerializer()

    def validate(self, attrs):  # type: ignore
        day_types = [item["day_type"] for item in attrs]
        if len(day_types) != len(set(day_types)):
            raise serializers.ValidationError("Each day type may appear only once.")
        return attrs


class QuoteRequestSerializer(serializers.Serializer):
    hotel_id = serializers.IntegerField()
    room_type_id = serializers.IntegerField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    coupon_code = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        if attrs["check_out"] <= attrs["check_in"]:
            raise serializers.ValidationError({"check_out": "Check-out must be after check-in."})
        return attrs
