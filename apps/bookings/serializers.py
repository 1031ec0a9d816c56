"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking, BookingGuest
from .services import CreateBookingRequest


class BookingGuestSerializer(serializers.ModelSerializer):
    class Meta:
        model = BookingGuest
        fields = ["full_name", "age", "id_type", "id_number"]
        extra_kwargs = {
            "id_type": {"required": False, "allow_blank": True},
            "id_number": {"required": False, "allow_blank": True},
        }


class BookingCreateSerializer(serializers.Serializer):
    """Guest input for a new booking. Business rules live in BookingLifecycle."""

    hotel_id = serializers.IntegerField(min_value=1)
    room_type_id = serializers.IntegerField(min_value=1)
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    num_guests = serializers.IntegerField(min_value=1, default=1)
    guest_name = serializers.CharField(max_length=255)
    guest_email = serializers.EmailField()
    guest_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    coupon_code = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    guests = BookingGuestSerializer(many=True, required=False)

    def validate(self, attrs):  # type: ignore
        if attrs["check_out_date"] <= attrs["check_in_date"]:
            raise serializers.ValidationError(
                {"check_out_date": "Check-out date must be after check-in date."}
            )
        return attrs

    def to_request(self) -> CreateBookingRequest:
        data = self.validated_data
        return CreateBookingRequest(
            hotel_id=data["hotel_id"],
            room_type_id=data["room_type_id"],
            check_in=data["check_in_date"],
            check_out=data["check_out_date"],
            num_guests=data["num_guests"],
            guest_name=data["guest_name"],
            guest_email=data["guest_email"],
            guest_phone=data.get("guest_phone", ""),
            special_requests=data.get("special_requests", ""),
            coupon_code=data.get("coupon_code") or None,
            guests=[dict(guest) for guest in data.get("guests", [])],
        )


class BookingSerializer(serializers.ModelSerializer):
    """Detailed booking representation including the price snapshot."""

    hotel_id = serializers.ReadOnlyField(source="hotel.id")
    hotel_name = serializers.ReadOnlyField(source="hotel.name")
    room_type_id = serializers.ReadOnlyField(source="room_type.id")
    room_type_name = serializers.ReadOnlyField(source="room_type.name")
    room_number = serializers.ReadOnlyField(source="room.room_number", default=None)
    coupon_code = serializers.ReadOnlyField(source="coupon.code", default=None)
    nights = serializers.ReadOnlyField()
    guests = BookingGuestSerializer(many=True, read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_reference",
            "user",
            "hotel_id",
            "hotel_name",
            "room_type_id",
            "room_type_name",
            "room",
            "room_number",
            "check_in_date",
            "check_out_date",
            "nights",
            "num_guests",
            "guest_name",
            "guest_email",
            "guest_phone",
            "special_requests",
            "guests",
            "base_price",
            "seasonal_multiplier",
            "day_type_multiplier",
            "occupancy_multiplier",
            "subtotal",
            "coupon_code",
            "coupon_discount",
            "taxes",
            "total_amount",
            "status",
            "actual_check_in",
            "actual_check_out",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AvailabilityQuerySerializer(serializers.Serializer):
    hotel_id = serializers.IntegerField(min_value=1)
    room_type_id = serializers.IntegerField(min_value=1)
    check_in = serializers.DateField()
    check_out = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["check_out"] <= attrs["check_in"]:
            raise serializers.ValidationError({"check_out": "Check-out date must be after check-in date."})
        return attrs


class CheckInSerializer(serializers.Serializer):
    room_id = serializers.IntegerField(min_value=1)


class CancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")


class HotelBookingFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices, required=False)
    from_date = serializers.DateField(required=False)
    to_date = serializers.DateField(required=False)
