"""Hotel catalog API views."""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import ROOM_STATUS_ROLES, IsHotelStaff, ensure_hotel_role

from .models import Hotel, Room, RoomType
from .serializers import HotelSerializer, RoomSerializer, RoomStatusSerializer, RoomTypeSerializer

logger = logging.getLogger(__name__)


class HotelViewSet(viewsets.ReadOnlyModelViewSet):
    """Public listing of active hotels and their room types."""

    queryset = Hotel.objects.filter(is_active=True)
    serializer_class = HotelSerializer
    permission_classes = [permissions.AllowAny]
    filterset_fields = ["city"]

    @action(detail=True, methods=["get"], url_path="room-types")
    def room_types(self, request, pk=None):  # type: ignore
        hotel = self.get_object()
        room_types = RoomType.objects.filter(hotel=hotel, is_active=True)
        return Response(RoomTypeSerializer(room_types, many=True).data)


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """Rooms of the caller's hotel with their operational status."""

    serializer_class = RoomSerializer
    permission_classes = [IsHotelStaff]
    filterset_fields = ["status", "room_type", "floor"]

    def get_queryset(self):  # type: ignore
        qs = Room.objects.active().select_related("room_type", "hotel")
        user = self.request.user
        if user.is_super_admin():
            hotel_id = self.request.query_params.get("hotel")
            return qs.filter(hotel_id=hotel_id) if hotel_id else qs
        return qs.filter(hotel_id=user.hotel_id)

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):  # type: ignore
        room = get_object_or_404(Room.objects.active(), pk=pk)
        ensure_hotel_role(request.user, room.hotel_id, ROOM_STATUS_ROLES)
        serializer = RoomStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room.set_status(serializer.validated_data["status"])
        logger.info(f"Room {room.room_number} of hotel {room.hotel_id} set to {room.status} by {request.user.pk}")
        return Response(RoomSerializer(room).data)
