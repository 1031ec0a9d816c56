"""Serializers for the hotel catalog."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Hotel, Room, RoomType


class RoomTypeSerializer(serializers.ModelSerializer):
    hotel_id = serializers.ReadOnlyField(source="hotel.id")

    class Meta:
        model = RoomType
        fields = ["id", "hotel_id", "name", "description", "base_price", "max_occupancy", "is_active"]
        read_only_fields = fields


class HotelSerializer(serializers.ModelSerializer):
    class Meta:
        model = Hotel
        fields = ["id", "name", "slug", "description", "city", "address", "phone", "email", "is_active"]
        read_only_fields = fields


class RoomSerializer(serializers.ModelSerializer):
    hotel_id = serializers.ReadOnlyField(source="hotel.id")
    room_type_id = serializers.ReadOnlyField(source="room_type.id")
    room_type_name = serializers.ReadOnlyField(source="room_type.name")

    class Meta:
        model = Room
        fields = [
            "id",
            "hotel_id",
            "room_type_id",
            "room_type_name",
            "room_number",
            "floor",
            "status",
            "is_active",
            "updated_at",
        ]
        read_only_fields = fields


class RoomStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Room.Status.choices)
